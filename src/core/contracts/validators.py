"""
JSON Schema контракт dual_record

Проверка JSON-представления dual-числа ({scalar_type, re, du}) до его
разбора в DualRecord. Схема лежит в schema/dual_record.json и проверяется
на корректность (Draft 2020-12) при первой загрузке.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft202012Validator

logger = logging.getLogger(__name__)

DUAL_RECORD_SCHEMA = "dual_record"


class SchemaLoader:
    """Загрузка и кэш JSON Schema из каталога (по умолчанию schema/ рядом с модулем)."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: Если файла схемы нет
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        logger.debug("Loaded JSON schema %s from %s", schema_name, schema_path)
        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


class ContractValidator:
    """Валидатор данных против одной схемы загрузчика."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.validator = Draft202012Validator((loader or _SCHEMA_LOADER).load_schema(schema_name))

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        return self.validator.is_valid(data)


class DualRecordValidator(ContractValidator):
    def __init__(self):
        super().__init__(DUAL_RECORD_SCHEMA)


def validate_dual_record(data: Dict[str, Any]) -> None:
    """
    Проверка JSON-записи dual-числа.

    Raises:
        ValidationError: Если запись не соответствует dual_record.json
    """
    DualRecordValidator().validate(data)
