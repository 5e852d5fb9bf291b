"""
Test suite for dual-numbers

Contains:
- tests/unit/          : Unit tests for individual modules
"""
