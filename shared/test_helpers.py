"""
Test helper functions and factory methods for the Dynamic Logic service.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass, field


@dataclass
class ViewCall:
    """Recorded view surface call."""
    method: str
    args: Tuple[Any, ...]


@dataclass
class RecordingView:
    """View surface that records every call and tracks resulting state."""
    calls: List[ViewCall] = field(default_factory=list)
    hidden_fields: set = field(default_factory=set)
    required_fields: set = field(default_factory=set)
    read_only_fields: set = field(default_factory=set)
    hidden_panels: set = field(default_factory=set)
    styled_panels: set = field(default_factory=set)
    option_lists: Dict[str, List[Any]] = field(default_factory=dict)

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append(ViewCall(method, args))

    def showField(self, name: str) -> None:
        self._record("showField", name)
        self.hidden_fields.discard(name)

    def hideField(self, name: str) -> None:
        self._record("hideField", name)
        self.hidden_fields.add(name)

    def setFieldRequired(self, name: str) -> None:
        self._record("setFieldRequired", name)
        self.required_fields.add(name)

    def setFieldNotRequired(self, name: str) -> None:
        self._record("setFieldNotRequired", name)
        self.required_fields.discard(name)

    def setFieldReadOnly(self, name: str) -> None:
        self._record("setFieldReadOnly", name)
        self.read_only_fields.add(name)

    def setFieldNotReadOnly(self, name: str) -> None:
        self._record("setFieldNotReadOnly", name)
        self.read_only_fields.discard(name)

    def showPanel(self, name: str, source: Optional[str] = None) -> None:
        self._record("showPanel", name, source)
        self.hidden_panels.discard(name)

    def hidePanel(self, name: str, silent: bool = False, source: Optional[str] = None) -> None:
        self._record("hidePanel", name, silent, source)
        self.hidden_panels.add(name)

    def stylePanel(self, name: str, source: Optional[str] = None) -> None:
        self._record("stylePanel", name, source)
        self.styled_panels.add(name)

    def unstylePanel(self, name: str, silent: bool = False, source: Optional[str] = None) -> None:
        self._record("unstylePanel", name, silent, source)
        self.styled_panels.discard(name)

    def setFieldOptionList(self, name: str, option_list: List[Any]) -> None:
        self._record("setFieldOptionList", name, list(option_list))
        self.option_lists[name] = list(option_list)

    def resetFieldOptionList(self, name: str) -> None:
        self._record("resetFieldOptionList", name)
        self.option_lists.pop(name, None)

    def methods(self) -> List[str]:
        """Names of the recorded calls in order."""
        return [call.method for call in self.calls]

    def reset(self) -> None:
        self.calls.clear()


class TestDataFactory:
    """Factory for creating test definitions."""

    @staticmethod
    def condition(attribute: str, value: Any = None, type: str = "equals") -> Dict[str, Any]:
        """Create a leaf condition."""
        item: Dict[str, Any] = {"type": type, "attribute": attribute}
        if value is not None:
            item["value"] = value
        return item

    @staticmethod
    def group(type: str, value: Any) -> Dict[str, Any]:
        """Create a composite condition."""
        return {"type": type, "value": value}

    @staticmethod
    def create_lead_definitions() -> Dict[str, Any]:
        """Definitions resembling a Lead form."""
        return {
            "fields": {
                "closeReason": {
                    "visible": {
                        "conditionGroup": [
                            {"type": "in", "attribute": "status", "value": ["Dead", "Converted"]}
                        ]
                    },
                    "required": {
                        "conditionGroup": [
                            {"type": "equals", "attribute": "status", "value": "Dead"}
                        ]
                    }
                },
                "amount": {
                    "readOnly": {
                        "conditionGroup": [
                            {"type": "isNotEmpty", "attribute": "convertedAt"}
                        ]
                    }
                }
            },
            "panels": {
                "conversion": {
                    "visible": {
                        "conditionGroup": [
                            {"type": "equals", "attribute": "status", "value": "Converted"}
                        ]
                    },
                    "styled": {
                        "conditionGroup": [
                            {
                                "type": "or",
                                "value": [
                                    {"type": "isTrue", "attribute": "isHot"},
                                    {"type": "greaterThan", "attribute": "amount", "value": 10000}
                                ]
                            }
                        ]
                    }
                }
            },
            "options": {
                "source": [
                    {
                        "conditionGroup": [
                            {"type": "equals", "attribute": "type", "value": "Partner"}
                        ],
                        "optionList": ["Partner", "Web Site"]
                    },
                    {
                        "conditionGroup": [
                            {"type": "isNotEmpty", "attribute": "campaignId"}
                        ],
                        "optionList": ["Campaign", "Email"]
                    }
                ]
            }
        }


def fixed_clock(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> Callable[[], datetime]:
    """Clock returning a fixed UTC moment."""
    moment = datetime(year, month, day, hour, minute, tzinfo=timezone.utc)

    def clock() -> datetime:
        return moment

    return clock
