"""
Collaborators the engine reads from and writes to.
"""

from collections.abc import Mapping
from typing import Any, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class DataSource(Protocol):
    """Live record the conditions are evaluated against."""

    def get(self, attribute: str) -> Any:
        ...


@runtime_checkable
class ViewSurface(Protocol):
    """Form view receiving the resulting state changes."""

    def showField(self, name: str) -> None:
        ...

    def hideField(self, name: str) -> None:
        ...

    def setFieldRequired(self, name: str) -> None:
        ...

    def setFieldNotRequired(self, name: str) -> None:
        ...

    def setFieldReadOnly(self, name: str) -> None:
        ...

    def setFieldNotReadOnly(self, name: str) -> None:
        ...

    def showPanel(self, name: str, source: Optional[str] = None) -> None:
        ...

    def hidePanel(self, name: str, silent: bool = False, source: Optional[str] = None) -> None:
        ...

    def stylePanel(self, name: str, source: Optional[str] = None) -> None:
        ...

    def unstylePanel(self, name: str, silent: bool = False, source: Optional[str] = None) -> None:
        ...

    def setFieldOptionList(self, name: str, option_list: List[Any]) -> None:
        ...

    def resetFieldOptionList(self, name: str) -> None:
        ...


class MappingDataSource:
    """Read-only data source over a plain mapping."""

    def __init__(self, values: Optional[Mapping] = None):
        self._values = values if values is not None else {}

    def get(self, attribute: str) -> Any:
        return self._values.get(attribute)

    def __repr__(self) -> str:
        return f"MappingDataSource({dict(self._values)!r})"


def as_data_source(source: Any) -> DataSource:
    """Wrap plain mappings; anything with ``get`` is used as is."""
    if source is None:
        return MappingDataSource()
    if isinstance(source, Mapping):
        return MappingDataSource(source)
    return source
