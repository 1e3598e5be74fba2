"""
Unit tests for definition validation.
"""

import json
import pytest
from unittest.mock import patch

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

import yaml

from service_dynamic_logic.app.logic.validation import load_definitions_file, validate_definitions
from shared.errors import ValidationError
from shared.test_helpers import TestDataFactory


def field_defs(*conditions):
    return {"fields": {"name": {"visible": {"conditionGroup": list(conditions)}}}}


class TestValidateDefinitions:
    """Test cases for validate_definitions."""

    def test_valid_definitions(self):
        """Test a well-formed rule set has no issues."""
        assert validate_definitions(TestDataFactory.create_lead_definitions()) == []

    def test_none_is_valid(self):
        """Test missing definitions are valid."""
        assert validate_definitions(None) == []

    def test_not_a_mapping(self):
        """Test non-mapping definitions."""
        assert validate_definitions(["fields"]) == ["Definitions must be a mapping"]

    def test_unknown_section(self):
        """Test unknown top-level sections are reported."""
        assert validate_definitions({"layout": {}}) == ["Unknown section: layout"]

    def test_unknown_type(self):
        """Test unknown condition types are reported."""
        errors = validate_definitions(field_defs({"type": "bogus", "attribute": "a"}))

        assert errors == ["fields.name.visible.conditionGroup[0]: unknown condition type 'bogus'"]

    @pytest.mark.parametrize("condition_type", [["equals"], {"name": "equals"}, 1])
    def test_non_string_type(self, condition_type):
        """Test condition types that are not strings are reported."""
        errors = validate_definitions(field_defs({"type": condition_type, "attribute": "x"}))

        assert errors == [f"fields.name.visible.conditionGroup[0]: invalid condition type {condition_type!r}"]

    def test_missing_attribute(self):
        """Test leaves without attribute are reported."""
        errors = validate_definitions(field_defs({"type": "isEmpty"}))

        assert errors == ["fields.name.visible.conditionGroup[0]: missing attribute"]

    def test_not_with_list(self):
        """Test not given a list is reported."""
        errors = validate_definitions(field_defs({"type": "not", "value": [TestDataFactory.condition("a", 1)]}))

        assert errors == ["fields.name.visible.conditionGroup[0]: 'not' expects a single condition, not a list"]

    def test_or_with_single_node(self):
        """Test or given a single node is reported."""
        errors = validate_definitions(field_defs({"type": "or", "value": TestDataFactory.condition("a", 1)}))

        assert errors == ["fields.name.visible.conditionGroup[0]: 'or' expects a list of conditions"]

    def test_nested_paths(self):
        """Test nested issues carry their path."""
        errors = validate_definitions(field_defs({
            "type": "and",
            "value": [
                TestDataFactory.condition("a", 1),
                {"type": "not", "value": {"type": "matches", "attribute": "email", "value": "/[/"}},
            ]
        }))

        assert errors == [
            "fields.name.visible.conditionGroup[0].value[1].value: invalid regular expression '/[/'"
        ]

    def test_in_requires_list(self):
        """Test in without a list value is reported."""
        errors = validate_definitions(field_defs({"type": "in", "attribute": "status", "value": "New"}))

        assert errors == ["fields.name.visible.conditionGroup[0]: 'in' expects a list value"]

    def test_unknown_aspect_and_missing_group(self):
        """Test aspect-level issues."""
        errors = validate_definitions({
            "panels": {
                "side": {"hidden": {"conditionGroup": []}, "visible": {}},
            }
        })

        assert errors == [
            "panels.side.hidden: unknown aspect",
            "panels.side.visible: missing conditionGroup",
        ]

    def test_option_entries(self):
        """Test option entries are checked."""
        errors = validate_definitions({
            "options": {
                "source": [{"conditionGroup": []}, "Partner"],
                "type": {"optionList": []},
            }
        })

        assert errors == [
            "options.source[0]: missing optionList",
            "options.source[1]: must be a mapping",
            "options.type: must be a list",
        ]


class TestLoadDefinitionsFile:
    """Test cases for loading definition files."""

    def test_load_json(self, tmp_path):
        """Test loading JSON definitions."""
        path = tmp_path / "Lead.json"
        path.write_text(json.dumps(TestDataFactory.create_lead_definitions()))

        assert load_definitions_file(path) == TestDataFactory.create_lead_definitions()

    def test_load_yaml(self, tmp_path):
        """Test loading YAML definitions."""
        path = tmp_path / "Lead.yaml"
        path.write_text(yaml.safe_dump(TestDataFactory.create_lead_definitions()))

        assert load_definitions_file(path) == TestDataFactory.create_lead_definitions()

    def test_invalid_json(self, tmp_path):
        """Test broken files raise ValidationError."""
        path = tmp_path / "Lead.json"
        path.write_text("{fields:")

        with pytest.raises(ValidationError) as exc_info:
            load_definitions_file(path)

        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_missing_file(self, tmp_path):
        """Test missing files raise ValidationError."""
        with pytest.raises(ValidationError):
            load_definitions_file(tmp_path / "missing.json")


class TestValidationScript:
    """Test cases for the validation script."""

    @pytest.fixture(autouse=True)
    def configure_logging(self):
        """Keep the global logging setup untouched."""
        with patch("scripts.validate_dynamic_logic.configure_logging") as mock_configure:
            yield mock_configure

    def test_main_configures_logging(self, tmp_path, configure_logging, monkeypatch):
        """Test logging is configured from the service settings."""
        from scripts.validate_dynamic_logic import main

        monkeypatch.setenv("DYNAMIC_LOGIC_LOG_LEVEL", "warning")
        path = tmp_path / "Lead.json"
        path.write_text(json.dumps(TestDataFactory.create_lead_definitions()))

        main([str(path)])

        configure_logging.assert_called_once_with("dynamic_logic", "warning")

    def test_main_valid(self, tmp_path, capsys):
        """Test exit code for valid files."""
        from scripts.validate_dynamic_logic import main

        path = tmp_path / "Lead.json"
        path.write_text(json.dumps(TestDataFactory.create_lead_definitions()))

        assert main([str(path)]) == 0
        assert "definitions are valid" in capsys.readouterr().out

    def test_main_invalid(self, tmp_path, capsys):
        """Test exit code for files with issues."""
        from scripts.validate_dynamic_logic import main

        path = tmp_path / "Lead.json"
        path.write_text(json.dumps(field_defs({"type": "bogus", "attribute": "a"})))

        assert main([str(path)]) == 1
        assert "unknown condition type 'bogus'" in capsys.readouterr().out

    def test_main_unreadable_file(self, tmp_path, capsys):
        """Test load failures are reported as issues."""
        from scripts.validate_dynamic_logic import main

        path = tmp_path / "Lead.yaml"
        path.write_text("fields: [")

        assert main([str(path)]) == 1
        assert "Invalid definitions file" in capsys.readouterr().out
