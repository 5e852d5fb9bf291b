"""
Core mathematical primitives, domain models and contracts.

This module contains the foundational building blocks the dual-number layer
is built on: scalar kinds and their promotion, IEEE-754 helpers, and the JSON
interchange contract.
"""
