"""
Static checks for dynamic logic definitions.

The engine tolerates malformed definitions by treating them as false or
skipping them; this module reports those spots so they can be fixed in the
form metadata.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Union

import yaml

from shared.errors import ValidationError
from .models import ConditionType, FieldAspect, GROUP_TYPES, PanelAspect
from .predicates import compile_regex_literal

LEAF_TYPES = frozenset(t.value for t in ConditionType) - GROUP_TYPES


def load_definitions_file(path: Union[str, Path]) -> Any:
    """Load definitions from a JSON or YAML file."""
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(f"Error reading file: {e}", details={"path": str(path)})

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValidationError(f"Invalid definitions file: {e}", details={"path": str(path)})


def validate_definitions(defs: Any) -> List[str]:
    """Validate a definitions object, returning a list of issues."""
    errors: List[str] = []

    if defs is None:
        return errors

    if not isinstance(defs, Mapping):
        errors.append("Definitions must be a mapping")
        return errors

    for key in defs:
        if key not in ("fields", "panels", "options"):
            errors.append(f"Unknown section: {key}")

    _validate_targets(defs.get("fields"), "fields", {a.value for a in FieldAspect}, errors)
    _validate_targets(defs.get("panels"), "panels", {a.value for a in PanelAspect}, errors)

    options = defs.get("options")
    if options is not None:
        if not isinstance(options, Mapping):
            errors.append("options must be a mapping")
        else:
            for field, items in options.items():
                path = f"options.{field}"
                if not isinstance(items, list):
                    errors.append(f"{path}: must be a list")
                    continue
                for index, item in enumerate(items):
                    item_path = f"{path}[{index}]"
                    if not isinstance(item, Mapping):
                        errors.append(f"{item_path}: must be a mapping")
                        continue
                    if not isinstance(item.get("optionList"), list):
                        errors.append(f"{item_path}: missing optionList")
                    _validate_group(item.get("conditionGroup"), f"{item_path}.conditionGroup", errors)

    return errors


def _validate_targets(section: Any, name: str, aspects: set, errors: List[str]) -> None:
    if section is None:
        return

    if not isinstance(section, Mapping):
        errors.append(f"{name} must be a mapping")
        return

    for target, item in section.items():
        path = f"{name}.{target}"
        if not isinstance(item, Mapping):
            errors.append(f"{path}: must be a mapping")
            continue

        for aspect, aspect_item in item.items():
            aspect_path = f"{path}.{aspect}"
            if aspect not in aspects:
                errors.append(f"{aspect_path}: unknown aspect")
                continue
            if not isinstance(aspect_item, Mapping) or "conditionGroup" not in aspect_item:
                errors.append(f"{aspect_path}: missing conditionGroup")
                continue
            _validate_group(aspect_item["conditionGroup"], f"{aspect_path}.conditionGroup", errors)


def _validate_group(group: Any, path: str, errors: List[str]) -> None:
    if group is None:
        return

    if not isinstance(group, list):
        errors.append(f"{path}: must be a list")
        return

    for index, node in enumerate(group):
        _validate_node(node, f"{path}[{index}]", errors)


def _validate_node(node: Any, path: str, errors: List[str]) -> None:
    if not isinstance(node, Mapping):
        errors.append(f"{path}: condition must be a mapping")
        return

    condition_type = node.get("type") or ConditionType.EQUALS.value
    value = node.get("value")

    if not isinstance(condition_type, str):
        errors.append(f"{path}: invalid condition type {condition_type!r}")
        return

    if condition_type in (ConditionType.AND.value, ConditionType.OR.value):
        if not isinstance(value, list):
            errors.append(f"{path}: '{condition_type}' expects a list of conditions")
            return
        for index, child in enumerate(value):
            _validate_node(child, f"{path}.value[{index}]", errors)
        return

    if condition_type == ConditionType.NOT.value:
        if isinstance(value, list):
            errors.append(f"{path}: 'not' expects a single condition, not a list")
            return
        if value is None:
            errors.append(f"{path}: 'not' without a condition")
            return
        _validate_node(value, f"{path}.value", errors)
        return

    if condition_type not in LEAF_TYPES:
        errors.append(f"{path}: unknown condition type '{condition_type}'")
        return

    if not node.get("attribute"):
        errors.append(f"{path}: missing attribute")

    if condition_type == ConditionType.MATCHES.value and compile_regex_literal(value) is None:
        errors.append(f"{path}: invalid regular expression {value!r}")

    if condition_type in (ConditionType.IN.value, ConditionType.NOT_IN.value) and not isinstance(value, list):
        errors.append(f"{path}: '{condition_type}' expects a list value")
