"""
Tests for JSON output handler with schema validation.
"""

import json
import pytest
import tempfile
from pathlib import Path

from outline_engine.data_models import OutlineResult
from outline_engine.json_handler import JSONHandler
from outline_engine.logging_config import JSONOutputError
from outline_engine.outline import empty_document_result, error_result


class TestJSONHandler:
    """Test cases for JSONHandler class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.handler = JSONHandler()
        self.temp_dir = Path(tempfile.mkdtemp())

        self.sample_result = OutlineResult(
            title="Test Document Title",
            outline=[
                {'level': 'H1', 'text': 'Introduction', 'page': 1},
                {'level': 'H2', 'text': 'Background', 'page': 2},
                {'level': 'H3', 'text': 'Related Work', 'page': 3},
            ]
        )

        # Multilingual test data
        self.multilingual_result = OutlineResult(
            title="Título con Acentos é Símbolos ñ",
            outline=[
                {'level': 'H1', 'text': 'Introducción', 'page': 1},
                {'level': 'H2', 'text': '日本語のセクション', 'page': 2},
                {'level': 'H3', 'text': 'Mathematical: ∑(xi) = ∫f(x)dx', 'page': 3},
            ]
        )

    def test_initialization_default(self):
        """Test JSONHandler loads the bundled schema."""
        assert self.handler.schema_path.endswith("output_schema.json")
        assert self.handler.schema is not None
        assert self.handler.schema['required'] == ['title', 'outline']

    def test_initialization_missing_schema(self):
        """Test JSONHandler without a schema skips validation."""
        handler = JSONHandler(str(self.temp_dir / "missing.json"))

        assert handler.schema is None
        assert handler.validate_schema({'anything': True})

    def test_initialization_invalid_schema(self):
        broken = self.temp_dir / "broken.json"
        broken.write_text("{ not json", encoding='utf-8')

        assert JSONHandler(str(broken)).schema is None

    def test_validate_normal_result(self):
        assert self.handler.validate_schema(self.sample_result.to_json_dict())

    def test_validate_fallback_results(self):
        assert self.handler.validate_schema(empty_document_result().to_json_dict())
        assert self.handler.validate_schema(error_result(RuntimeError("boom")).to_json_dict())

    def test_validate_rejects_empty_outline(self):
        assert not self.handler.validate_schema({'title': 'Title', 'outline': []})

    def test_validate_rejects_unknown_level(self):
        data = {'title': 'Title', 'outline': [{'level': 'H4', 'text': 'Deep', 'page': 1}]}

        assert not self.handler.validate_schema(data)

    def test_validate_rejects_page_zero(self):
        data = {'title': 'Title', 'outline': [{'level': 'H1', 'text': 'Top', 'page': 0}]}

        assert not self.handler.validate_schema(data)

    def test_validate_rejects_extra_fields(self):
        data = {'title': 'Title', 'outline': [{'level': 'H1', 'text': 'Top', 'page': 1, 'font_size': 18}]}

        assert not self.handler.validate_schema(data)

    def test_validate_error_requires_timestamp(self):
        data = {'title': 'Title', 'outline': [{'level': 'H1', 'text': 'Top', 'page': 1}], 'error': 'boom'}

        assert not self.handler.validate_schema(data)

    def test_schema_errors_lists_every_violation(self):
        data = {'title': '', 'outline': [{'level': 'H4', 'text': 'Deep', 'page': 1}]}

        errors = self.handler.schema_errors(data)

        assert len(errors) == 2
        assert any(error.startswith("title:") for error in errors)
        assert any(error.startswith("outline/0/level:") for error in errors)
        assert self.handler.schema_errors(self.sample_result.to_json_dict()) == []

    def test_create_json_output(self):
        json_data = self.handler.create_json_output(self.sample_result)

        assert json_data == {
            'title': "Test Document Title",
            'outline': self.sample_result.outline
        }

    def test_create_json_output_error_fields(self):
        json_data = self.handler.create_json_output(error_result(ValueError("bad xref")))

        assert json_data['error'] == "bad xref"
        assert json_data['timestamp']

    def test_serialize_preserves_unicode(self):
        serialized = self.handler.serialize(self.multilingual_result.to_json_dict())

        assert "Título con Acentos" in serialized
        assert "日本語のセクション" in serialized
        assert "\\u" not in serialized

    def test_write_json_file(self):
        output_file = self.temp_dir / "nested" / "result.json"

        self.handler.write_json_file(self.multilingual_result.to_json_dict(), output_file)

        with open(output_file, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
        assert loaded['title'] == "Título con Acentos é Símbolos ñ"
        assert loaded['outline'][2]['text'] == 'Mathematical: ∑(xi) = ∫f(x)dx'

    def test_write_json_file_blocked_directory(self):
        blocker = self.temp_dir / "blocker"
        blocker.write_text("a file, not a directory")

        with pytest.raises(JSONOutputError):
            self.handler.write_json_file({'title': 'x'}, blocker / "result.json")

    def test_write_json_file_unserializable(self):
        with pytest.raises(JSONOutputError):
            self.handler.write_json_file({'title': object()}, self.temp_dir / "bad.json")

    def test_process_and_write(self):
        output_file = self.temp_dir / "report.json"

        json_data = self.handler.process_and_write(self.sample_result, output_file)

        assert json.loads(output_file.read_text(encoding='utf-8')) == json_data
        assert json_data['outline'][0] == {'level': 'H1', 'text': 'Introduction', 'page': 1}

    def test_process_and_write_invalid_result_is_still_written(self):
        output_file = self.temp_dir / "odd.json"
        odd = OutlineResult(title="", outline=[])

        json_data = self.handler.process_and_write(odd, output_file)

        assert output_file.exists()
        assert json_data == {'title': '', 'outline': []}
