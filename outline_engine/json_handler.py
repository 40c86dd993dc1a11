"""
JSON output of outline results.

Results are converted to the ``{"title", "outline", "error"?, "timestamp"?}``
shape, checked against the bundled JSON schema and written as UTF-8 with
non-ASCII text kept readable.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from .config import SCHEMA_PATH
from .data_models import OutlineResult
from .logging_config import setup_logging, JSONOutputError

logger = setup_logging()


class JSONHandler:
    """
    Formats, validates and writes outline results.

    A missing or unreadable schema disables validation instead of failing,
    since the output shape is already guaranteed by OutlineResult.
    """

    def __init__(self, schema_path: Optional[str] = None):
        """
        Args:
            schema_path: JSON schema file, defaults to OUTLINE_SCHEMA_PATH
        """
        self.schema_path = schema_path or SCHEMA_PATH
        self.schema = self._load_schema()
        self._validator = Draft7Validator(self.schema) if self.schema else None

    def _load_schema(self) -> Optional[Dict[str, Any]]:
        schema_file = Path(self.schema_path)
        if not schema_file.is_file():
            logger.warning(f"Output schema not found at {self.schema_path}, validation disabled")
            return None

        try:
            schema = json.loads(schema_file.read_text(encoding='utf-8'))
            Draft7Validator.check_schema(schema)
        except (OSError, json.JSONDecodeError, SchemaError) as e:
            logger.error(f"Unusable output schema {self.schema_path}: {e}")
            return None

        logger.debug(f"Output schema loaded from {self.schema_path}")
        return schema

    def schema_errors(self, json_data: Dict[str, Any]) -> List[str]:
        """
        List every schema violation of ``json_data``, as ``path: message`` strings.
        """
        if self._validator is None:
            return []
        return [
            f"{'/'.join(str(part) for part in error.absolute_path) or '<root>'}: {error.message}"
            for error in self._validator.iter_errors(json_data)
        ]

    def validate_schema(self, json_data: Dict[str, Any]) -> bool:
        """True when ``json_data`` satisfies the schema (or no schema is loaded)."""
        errors = self.schema_errors(json_data)
        for error in errors:
            logger.error(f"Output schema violation - {error}")
        return not errors

    def create_json_output(self, result: OutlineResult, validate: bool = True) -> Dict[str, Any]:
        """
        Convert a result to its JSON dictionary.

        Schema violations are logged; the data is returned either way.
        """
        json_data = result.to_json_dict()
        if validate and not self.validate_schema(json_data):
            logger.warning(f"Writing outline for '{result.title}' despite schema violations")
        return json_data

    def serialize(self, json_data: Dict[str, Any]) -> str:
        return json.dumps(json_data, ensure_ascii=False, indent=2)

    def write_json_file(self, json_data: Dict[str, Any], output_path: Union[str, Path]) -> None:
        """
        Write ``json_data`` to ``output_path``, creating parent directories.

        Raises:
            JSONOutputError: If the data cannot be serialized or the file written
        """
        output_file = Path(output_path)
        try:
            content = self.serialize(json_data)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(content, encoding='utf-8')
        except (OSError, TypeError, ValueError) as e:
            raise JSONOutputError(f"Cannot write {output_file}: {e}") from e

        logger.info(f"Outline written to {output_file}")

    def process_and_write(self, result: OutlineResult, output_path: Union[str, Path],
                          validate: bool = True) -> Dict[str, Any]:
        """
        Format, validate and write one result.

        Returns:
            The JSON data that was written

        Raises:
            JSONOutputError: If the file cannot be written
        """
        json_data = self.create_json_output(result, validate)
        self.write_json_file(json_data, output_path)
        return json_data
