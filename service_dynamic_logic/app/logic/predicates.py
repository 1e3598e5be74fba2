"""
Leaf predicate evaluation.

Values come from the record layer, so truthiness and equality follow its
rules rather than Python's: empty containers are truthy, NaN is falsy and
a boolean never equals a number.
"""

import math
import operator
import re
from typing import Any, Callable, Dict, Optional

from .dates import DateTimeHelper
from .models import ConditionType

SEQUENCE_TYPES = (list, tuple)

REGEX_LITERAL = re.compile(r"/(.*)/([a-z]*)")

REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": 0,
    "u": 0,
    "y": 0,
}


def is_truthy(value: Any) -> bool:
    """Truthiness as seen by the record layer."""
    if value is None or value is False:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def to_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, SEQUENCE_TYPES):
        return ",".join("" if item is None else to_text(item) for item in value)
    return str(value)


def compile_regex_literal(literal: Any) -> Optional["re.Pattern[str]"]:
    """Compile a ``/pattern/flags`` literal, ``None`` if it is not valid."""
    if not isinstance(literal, str):
        return None

    match = REGEX_LITERAL.fullmatch(literal)
    if not match:
        return None

    pattern, flag_letters = match.group(1), match.group(2)
    if len(set(flag_letters)) != len(flag_letters):
        return None

    flags = 0
    for letter in flag_letters:
        if letter not in REGEX_FLAGS:
            return None
        flags |= REGEX_FLAGS[letter]

    try:
        return re.compile(pattern, flags)
    except re.error:
        return None


def is_empty(actual: Any) -> bool:
    if isinstance(actual, SEQUENCE_TYPES):
        return len(actual) == 0
    return actual is None or actual == ""


def contains(actual: Any, expected: Any) -> bool:
    if not is_truthy(actual):
        return False
    if isinstance(actual, str):
        if expected is None:
            return False
        return to_text(expected) in actual
    if isinstance(actual, SEQUENCE_TYPES):
        return any(strict_equals(item, expected) for item in actual)
    return False


def starts_with(actual: Any, expected: Any) -> bool:
    if not is_truthy(actual):
        return False
    if isinstance(actual, str):
        return expected is not None and actual.startswith(to_text(expected))
    if isinstance(actual, SEQUENCE_TYPES):
        return len(actual) > 0 and strict_equals(actual[0], expected)
    return False


def ends_with(actual: Any, expected: Any) -> bool:
    if not is_truthy(actual):
        return False
    if isinstance(actual, str):
        return expected is not None and actual.endswith(to_text(expected))
    if isinstance(actual, SEQUENCE_TYPES):
        return len(actual) > 0 and strict_equals(actual[-1], expected)
    return False


def matches(actual: Any, expected: Any) -> bool:
    if not is_truthy(actual):
        return False
    regex = compile_regex_literal(expected)
    if regex is None:
        return False
    return regex.search(to_text(actual)) is not None


def compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    """Ordered comparison that is false for missing or incomparable values."""
    def check(actual: Any, expected: Any) -> bool:
        if actual is None or expected is None:
            return False
        try:
            return bool(op(actual, expected))
        except TypeError:
            return False
    return check


def is_in(actual: Any, expected: Any) -> bool:
    if isinstance(expected, SEQUENCE_TYPES):
        return any(strict_equals(actual, item) for item in expected)
    if isinstance(expected, str) and isinstance(actual, str):
        return actual in expected
    return False


class PredicateEvaluator:
    """Evaluates leaf condition types against an actual and expected value."""

    def __init__(self, date_time: Optional[DateTimeHelper] = None):
        self.date_time = date_time or DateTimeHelper()
        self._handlers: Dict[str, Callable[[Any, Any], bool]] = {
            ConditionType.EQUALS.value: self._equals,
            ConditionType.NOT_EQUALS.value: self._not_equals,
            ConditionType.IS_EMPTY.value: lambda actual, expected: is_empty(actual),
            ConditionType.IS_NOT_EMPTY.value: lambda actual, expected: not is_empty(actual),
            ConditionType.IS_TRUE.value: lambda actual, expected: is_truthy(actual),
            ConditionType.IS_FALSE.value: lambda actual, expected: not is_truthy(actual),
            ConditionType.CONTAINS.value: contains,
            ConditionType.HAS.value: contains,
            ConditionType.NOT_CONTAINS.value: lambda actual, expected: not contains(actual, expected),
            ConditionType.NOT_HAS.value: lambda actual, expected: not contains(actual, expected),
            ConditionType.STARTS_WITH.value: starts_with,
            ConditionType.ENDS_WITH.value: ends_with,
            ConditionType.MATCHES.value: matches,
            ConditionType.GREATER_THAN.value: compare(operator.gt),
            ConditionType.LESS_THAN.value: compare(operator.lt),
            ConditionType.GREATER_THAN_OR_EQUALS.value: compare(operator.ge),
            ConditionType.LESS_THAN_OR_EQUALS.value: compare(operator.le),
            ConditionType.IN.value: is_in,
            ConditionType.NOT_IN.value: lambda actual, expected: not is_in(actual, expected),
            ConditionType.IS_TODAY.value: self._dated(self.date_time.is_today),
            ConditionType.IN_FUTURE.value: self._dated(self.date_time.is_future),
            ConditionType.IN_PAST.value: self._dated(self.date_time.is_past),
        }

    def supports(self, condition_type: str) -> bool:
        return condition_type in self._handlers

    def evaluate(self, condition_type: str, actual: Any, expected: Any) -> bool:
        """Evaluate a leaf; unknown types are false."""
        handler = self._handlers.get(condition_type)
        if handler is None:
            return False
        return handler(actual, expected)

    @staticmethod
    def _equals(actual: Any, expected: Any) -> bool:
        # An unset expected value never matches
        if not is_truthy(expected):
            return False
        return strict_equals(actual, expected)

    @staticmethod
    def _not_equals(actual: Any, expected: Any) -> bool:
        if not is_truthy(expected):
            return False
        return not strict_equals(actual, expected)

    @staticmethod
    def _dated(check: Callable[[Any], bool]) -> Callable[[Any, Any], bool]:
        def handler(actual: Any, expected: Any) -> bool:
            if not is_truthy(actual):
                return False
            return check(actual)
        return handler
