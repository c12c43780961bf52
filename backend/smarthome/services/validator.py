"""
SmartHome API: JSON Schema Validator
====================================

What:  Compiles named JSON schemas once and validates request payloads against them.
Why:   Request bodies are free-form documents (devices carry arbitrary fields),
       so they are checked against JSON Schema rather than a pydantic model.
How:   Schema files live in <schema_dir>/<resource>/<name>.json; the file stem
       is the schema name. Each schema is checked with its metaschema and turned
       into a jsonschema validator instance at load time. validate() only
       iterates errors on an already-built validator, which keeps no state
       between calls.
Who:   Built in the lifespan handler; used by the `validate` pipeline step.

Fail-closed contract:
    validate() answers (False, None) for an unknown schema name or when the
    check itself raises. It never lets a payload through because validation
    could not run.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiofiles
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for

logger = logging.getLogger(__name__)

ValidationResult = Tuple[bool, Optional[List[Dict[str, str]]]]


class SchemaValidator:
    """Holds one compiled validator per schema name."""

    def __init__(self, schemas: Optional[Dict[str, Dict[str, Any]]] = None):
        self._validators: Dict[str, Validator] = {}
        for name, schema in (schemas or {}).items():
            self.register(name, schema)

    @classmethod
    async def from_directory(cls, schema_dir: Path) -> "SchemaValidator":
        """
        Load and compile every `*/*.json` schema under schema_dir.

        Raises:
            OSError, json.JSONDecodeError, jsonschema.SchemaError: a schema file
            is unreadable or invalid. Startup should not continue with a
            partial schema set.
        """
        validator = cls()
        for path in sorted(Path(schema_dir).glob("*/*.json")):
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                schema = json.loads(await f.read())
            validator.register(path.stem, schema)
            logger.debug("Compiled schema %s from %s", path.stem, path)
        logger.info("Loaded %d validation schemas from %s", len(validator.names), schema_dir)
        return validator

    def register(self, name: str, schema: Dict[str, Any]) -> None:
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
        self._validators[name] = validator_cls(schema)

    @property
    def names(self) -> List[str]:
        return sorted(self._validators)

    def validate(self, name: str, data: Any) -> ValidationResult:
        """
        Validate data against the named schema.

        Returns:
            (True, None) when valid, (False, [{"path", "message"}, ...]) when
            invalid, (False, None) when the schema is unknown or the check
            raised.
        """
        compiled = self._validators.get(name)
        if compiled is None:
            logger.error("Unknown validation schema: %s", name)
            return False, None

        try:
            errors = [
                {"path": error.json_path, "message": error.message}
                for error in compiled.iter_errors(data)
            ]
        except Exception as e:
            logger.error("Validation against %s raised: %s", name, str(e), exc_info=True)
            return False, None

        if errors:
            return False, errors
        return True, None
