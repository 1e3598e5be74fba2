"""
Dynamic logic data models.

Condition trees are a tagged union: a leaf ``Condition`` tests one record
attribute, a ``ConditionGroup`` combines children with and/or/not. Rule
definitions arrive as JSON-like dicts (form metadata) and are parsed with
``from_dict``; parsing never fails on malformed nodes, it degrades them to
shapes that evaluate to false or are skipped.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from shared.errors import DefinitionError


class ConditionType(str, Enum):
    """Condition node types."""
    AND = "and"
    OR = "or"
    NOT = "not"
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"
    IS_TRUE = "isTrue"
    IS_FALSE = "isFalse"
    CONTAINS = "contains"
    HAS = "has"
    NOT_CONTAINS = "notContains"
    NOT_HAS = "notHas"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    MATCHES = "matches"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    GREATER_THAN_OR_EQUALS = "greaterThanOrEquals"
    LESS_THAN_OR_EQUALS = "lessThanOrEquals"
    IN = "in"
    NOT_IN = "notIn"
    IS_TODAY = "isToday"
    IN_FUTURE = "inFuture"
    IN_PAST = "inPast"


GROUP_TYPES = frozenset({ConditionType.AND.value, ConditionType.OR.value, ConditionType.NOT.value})


class FieldAspect(str, Enum):
    """Field UI-state dimensions."""
    VISIBLE = "visible"
    REQUIRED = "required"
    READ_ONLY = "readOnly"


class PanelAspect(str, Enum):
    """Panel UI-state dimensions."""
    VISIBLE = "visible"
    STYLED = "styled"


@dataclass
class Condition:
    """Leaf predicate over a single attribute."""
    type: str = ConditionType.EQUALS.value
    attribute: Optional[str] = None
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.attribute is not None:
            data["attribute"] = self.attribute
        if self.value is not None:
            data["value"] = copy.deepcopy(self.value)
        return data


@dataclass
class ConditionGroup:
    """Composite node.

    ``and``/``or`` hold an ordered list of children; ``not`` holds a single
    child. ``None`` means the group was declared without a value.
    """
    type: str
    value: Union["Condition", "ConditionGroup", List[Union["Condition", "ConditionGroup"]], None] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if isinstance(self.value, list):
            data["value"] = [item.to_dict() for item in self.value]
        elif self.value is not None:
            data["value"] = self.value.to_dict()
        return data


ConditionNode = Union[Condition, ConditionGroup]


def parse_condition(raw: Any) -> ConditionNode:
    """Parse a JSON-like condition node."""
    if isinstance(raw, (Condition, ConditionGroup)):
        return raw

    if not isinstance(raw, Mapping):
        # A node of the wrong shape behaves like a leaf without an attribute
        return Condition()

    condition_type = raw.get("type") or ConditionType.EQUALS.value
    if isinstance(condition_type, ConditionType):
        condition_type = condition_type.value
    elif not isinstance(condition_type, str):
        condition_type = str(condition_type)

    if condition_type in GROUP_TYPES:
        value = raw.get("value")
        if condition_type == ConditionType.NOT.value:
            # A list given to "not" negates the conjunction of its items
            if isinstance(value, (list, tuple)):
                return ConditionGroup(
                    type=condition_type,
                    value=ConditionGroup(type=ConditionType.AND.value, value=parse_condition_list(value)),
                )
            return ConditionGroup(
                type=condition_type,
                value=None if is_blank(value) else parse_condition(value),
            )
        return ConditionGroup(type=condition_type, value=parse_condition_list(value))

    attribute = raw.get("attribute")
    return Condition(
        type=condition_type,
        attribute=attribute if attribute else None,
        value=copy.deepcopy(raw.get("value")),
    )


def parse_condition_list(raw: Any) -> Optional[List[ConditionNode]]:
    """Parse an ordered list of condition nodes.

    ``None`` (or another empty value) stays ``None``; an empty mapping is an
    empty list; a single node is wrapped into a one-element list.
    """
    if isinstance(raw, (list, tuple)):
        return [parse_condition(item) for item in raw]

    if isinstance(raw, Mapping) and not raw:
        return []

    if is_blank(raw):
        return None

    return [parse_condition(raw)]


def dump_condition_list(nodes: Optional[List[ConditionNode]]) -> Optional[List[Dict[str, Any]]]:
    if nodes is None:
        return None
    return [node.to_dict() for node in nodes]


@dataclass
class AspectRule:
    """Condition attached to one aspect of a field or panel."""
    condition_group: Optional[List[ConditionNode]] = None

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["AspectRule"]:
        if isinstance(raw, AspectRule):
            return raw
        if not raw or not isinstance(raw, Mapping):
            return None
        return cls(condition_group=parse_condition_list(raw.get("conditionGroup")))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.condition_group is not None:
            data["conditionGroup"] = dump_condition_list(self.condition_group)
        return data


@dataclass
class FieldRule:
    """Per-aspect rules for one field."""
    aspects: Dict[FieldAspect, AspectRule] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "FieldRule":
        aspects: Dict[FieldAspect, AspectRule] = {}
        if isinstance(raw, Mapping):
            for aspect in FieldAspect:
                rule = AspectRule.from_dict(raw.get(aspect.value))
                if rule is not None:
                    aspects[aspect] = rule
        return cls(aspects=aspects)

    def to_dict(self) -> Dict[str, Any]:
        return {aspect.value: rule.to_dict() for aspect, rule in self.aspects.items()}


@dataclass
class PanelRule:
    """Per-aspect rules for one panel."""
    aspects: Dict[PanelAspect, AspectRule] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "PanelRule":
        aspects: Dict[PanelAspect, AspectRule] = {}
        if isinstance(raw, Mapping):
            for aspect in PanelAspect:
                rule = AspectRule.from_dict(raw.get(aspect.value))
                if rule is not None:
                    aspects[aspect] = rule
        return cls(aspects=aspects)

    def to_dict(self) -> Dict[str, Any]:
        return {aspect.value: rule.to_dict() for aspect, rule in self.aspects.items()}


@dataclass
class OptionItem:
    """Option list applied when its condition group holds."""
    condition_group: Optional[List[ConditionNode]] = None
    option_list: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> "OptionItem":
        if not isinstance(raw, Mapping):
            return cls()
        option_list = raw.get("optionList") or []
        return cls(
            condition_group=parse_condition_list(raw.get("conditionGroup")),
            option_list=list(option_list) if isinstance(option_list, (list, tuple)) else [],
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"optionList": list(self.option_list)}
        if self.condition_group is not None:
            data["conditionGroup"] = dump_condition_list(self.condition_group)
        return data


@dataclass
class DynamicLogicDefs:
    """Full rule set for one form."""
    fields: Dict[str, FieldRule] = field(default_factory=dict)
    panels: Dict[str, PanelRule] = field(default_factory=dict)
    options: Dict[str, List[OptionItem]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "DynamicLogicDefs":
        """Build definitions from form metadata."""
        if isinstance(raw, DynamicLogicDefs):
            return copy.deepcopy(raw)

        if raw is None:
            return cls()

        if not isinstance(raw, Mapping):
            raise DefinitionError(
                "Dynamic logic definitions must be a mapping",
                details={"type": type(raw).__name__},
            )

        fields = raw.get("fields") or {}
        panels = raw.get("panels") or {}
        options = raw.get("options") or {}

        return cls(
            fields={
                name: FieldRule.from_dict(item)
                for name, item in _mapping_items(fields)
            },
            panels={
                name: PanelRule.from_dict(item)
                for name, item in _mapping_items(panels)
            },
            options={
                name: [OptionItem.from_dict(entry) for entry in item]
                if isinstance(item, (list, tuple)) else []
                for name, item in _mapping_items(options)
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": {name: rule.to_dict() for name, rule in self.fields.items()},
            "panels": {name: rule.to_dict() for name, rule in self.panels.items()},
            "options": {
                name: [entry.to_dict() for entry in items]
                for name, items in self.options.items()
            },
        }


def is_blank(raw: Any) -> bool:
    if raw is None or raw is False:
        return True
    if isinstance(raw, (int, float, str)) and not isinstance(raw, bool):
        return not raw
    return False


def _mapping_items(raw: Any):
    if not isinstance(raw, Mapping):
        return []
    return list(raw.items())
