"""
Dynamic logic package.

Evaluates form conditions (and/or/not trees of attribute predicates)
against the bound record and applies the outcome to the form view.

Modules of interest:
- models: Condition tree and rule definition data classes.
- predicates: Leaf predicate semantics.
- dates: Date parsing and day comparisons for date predicates.
- surfaces: Data source and view surface protocols.
- engine: The DynamicLogic evaluator and mutation dispatch.
- validation: Static checks for definition objects.
"""

from .engine import DynamicLogic
from .models import DynamicLogicDefs, parse_condition
from .surfaces import DataSource, MappingDataSource, ViewSurface

__all__ = [
    "DynamicLogic",
    "DynamicLogicDefs",
    "DataSource",
    "MappingDataSource",
    "ViewSurface",
    "parse_condition",
]
