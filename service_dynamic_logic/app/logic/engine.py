"""
Dynamic logic engine.

Applies form appearance rules (field visibility, required and read-only
state, panel visibility and styling, option lists) depending on the
current values of the bound record.
"""

import copy
from typing import Any, Callable, Dict, List, Optional, Tuple

from shared.config import DynamicLogicConfig, get_config
from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from .dates import DateTimeHelper
from .models import (
    AspectRule, Condition, ConditionGroup, ConditionType, DynamicLogicDefs,
    FieldAspect, OptionItem, PanelAspect, PanelRule, is_blank, parse_condition,
    parse_condition_list
)
from .predicates import PredicateEvaluator
from .surfaces import DataSource, ViewSurface, as_data_source

FIELD_ASPECTS: Tuple[FieldAspect, ...] = (FieldAspect.VISIBLE, FieldAspect.REQUIRED, FieldAspect.READ_ONLY)
PANEL_ASPECTS: Tuple[PanelAspect, ...] = (PanelAspect.VISIBLE, PanelAspect.STYLED)

ViewCall = Callable[[ViewSurface, str, str], None]

FIELD_MUTATIONS: Dict[Tuple[FieldAspect, bool], ViewCall] = {
    (FieldAspect.VISIBLE, True): lambda view, name, source: view.showField(name),
    (FieldAspect.VISIBLE, False): lambda view, name, source: view.hideField(name),
    (FieldAspect.REQUIRED, True): lambda view, name, source: view.setFieldRequired(name),
    (FieldAspect.REQUIRED, False): lambda view, name, source: view.setFieldNotRequired(name),
    (FieldAspect.READ_ONLY, True): lambda view, name, source: view.setFieldReadOnly(name),
    (FieldAspect.READ_ONLY, False): lambda view, name, source: view.setFieldNotReadOnly(name),
}

PANEL_MUTATIONS: Dict[Tuple[PanelAspect, bool], ViewCall] = {
    (PanelAspect.VISIBLE, True): lambda view, name, source: view.showPanel(name, source),
    (PanelAspect.VISIBLE, False): lambda view, name, source: view.hidePanel(name, False, source),
    (PanelAspect.STYLED, True): lambda view, name, source: view.stylePanel(name, source),
    (PanelAspect.STYLED, False): lambda view, name, source: view.unstylePanel(name, False, source),
}


class DynamicLogic:
    """Evaluates dynamic logic definitions against a record and updates a view."""

    def __init__(
        self,
        defs: Any,
        data_source: Any,
        view: ViewSurface,
        config: Optional[DynamicLogicConfig] = None,
        date_time: Optional[DateTimeHelper] = None,
        metrics: Optional[MetricsCollector] = None,
        form_id: Optional[str] = None,
        entity_type: Optional[str] = None,
        record_id: Optional[str] = None,
    ):
        self.config = config or get_config()
        self.logger = get_logger("dynamic_logic.engine")

        # Correlate log lines with the bound form
        log_context = {"form_id": form_id, "entity_type": entity_type, "record_id": record_id}
        log_context = {key: value for key, value in log_context.items() if value}
        if log_context:
            self.logger = self.logger.bind(**log_context)

        self.defs = DynamicLogicDefs.from_dict(defs)
        self.data_source: DataSource = as_data_source(data_source)
        self.view = view
        self.date_time = date_time or DateTimeHelper(self.config.timezone)
        self.predicates = PredicateEvaluator(self.date_time)
        if metrics is not None:
            self.metrics: Optional[MetricsCollector] = metrics
        elif self.config.enable_metrics:
            self.metrics = get_metrics_collector(self.config.service_name)
        else:
            self.metrics = None

    @property
    def definitions(self) -> Dict[str, Any]:
        """Current definitions rendered as a plain dict."""
        return self.defs.to_dict()

    def process(self) -> None:
        """Re-evaluate every rule and apply the results to the view."""
        if self.metrics:
            with self.metrics.time_process():
                self._process()
        else:
            self._process()

    def _process(self) -> None:
        mutations = 0

        for field, rule in self.defs.fields.items():
            for aspect in FIELD_ASPECTS:
                aspect_rule = rule.aspects.get(aspect)
                if aspect_rule is None or aspect_rule.condition_group is None:
                    continue

                result = self.check_condition_group(aspect_rule.condition_group)
                FIELD_MUTATIONS[(aspect, result)](self.view, field, self.config.panel_source)
                self._record_mutation("field", aspect.value, result)
                mutations += 1

        for panel in list(self.defs.panels):
            for aspect in PANEL_ASPECTS:
                if self.process_panel(panel, aspect):
                    mutations += 1

        for field, items in self.defs.options.items():
            self._process_options(field, items)
            mutations += 1

        self.logger.debug(
            "Dynamic logic processed",
            fields=len(self.defs.fields),
            panels=len(self.defs.panels),
            options=len(self.defs.options),
            mutations=mutations
        )

    def process_panel(self, panel: str, aspect: PanelAspect) -> bool:
        """Evaluate one panel aspect; returns whether the view was touched."""
        try:
            aspect = PanelAspect(aspect)
        except ValueError:
            self.logger.warning("Unknown panel aspect", panel=panel, aspect=aspect)
            return False

        rule = self.defs.panels.get(panel)
        if rule is None:
            return False

        aspect_rule = rule.aspects.get(aspect)
        if aspect_rule is None or aspect_rule.condition_group is None:
            return False

        result = self.check_condition_group(aspect_rule.condition_group)
        PANEL_MUTATIONS[(aspect, result)](self.view, panel, self.config.panel_source)
        self._record_mutation("panel", aspect.value, result)
        return True

    def _process_options(self, field: str, items: List[OptionItem]) -> None:
        for item in items:
            if self.check_condition_group(item.condition_group):
                self.view.setFieldOptionList(field, list(item.option_list))
                self._record_mutation("options", "optionList", True)
                return

        self.view.resetFieldOptionList(field)
        self._record_mutation("options", "optionList", False)

    def check_condition_group(self, data: Any, type: str = ConditionType.AND.value) -> bool:
        """Check a condition group.

        ``and`` over nothing is true, ``or`` over nothing is false. ``not``
        takes a single node and is false when it is missing.
        """
        type = type or ConditionType.AND.value

        if type == ConditionType.AND.value:
            for item in parse_condition_list(data) or []:
                if not self.check_condition(item):
                    return False
            return True

        if type == ConditionType.OR.value:
            for item in parse_condition_list(data) or []:
                if self.check_condition(item):
                    return True
            return False

        if type == ConditionType.NOT.value:
            if is_blank(data):
                return False
            if isinstance(data, (list, tuple)):
                return not self.check_condition_group(data)
            return not self.check_condition(data)

        return False

    def check_condition(self, condition: Any) -> bool:
        """Check a single condition node."""
        node = parse_condition(condition)

        if isinstance(node, ConditionGroup):
            return self.check_condition_group(node.value, node.type)

        return self._check_leaf(node)

    def _check_leaf(self, condition: Condition) -> bool:
        if not condition.attribute:
            return False

        if not self.predicates.supports(condition.type):
            self.logger.warning("Unknown condition type", type=condition.type, attribute=condition.attribute)
            if self.metrics:
                self.metrics.record_unknown_type(condition.type)
            return False

        try:
            actual = self.data_source.get(condition.attribute)
            return self.predicates.evaluate(condition.type, actual, condition.value)
        except Exception as e:
            self.logger.error(
                "Error evaluating condition",
                type=condition.type,
                attribute=condition.attribute,
                error=str(e)
            )
            if self.metrics:
                self.metrics.record_condition_error(condition.type)
            return False

    def add_panel_visible_condition(self, name: str, item: Any) -> None:
        """Set the visibility rule of a panel and apply it."""
        self._add_panel_condition(name, PanelAspect.VISIBLE, item)

    def add_panel_styled_condition(self, name: str, item: Any) -> None:
        """Set the styling rule of a panel and apply it."""
        self._add_panel_condition(name, PanelAspect.STYLED, item)

    def _add_panel_condition(self, name: str, aspect: PanelAspect, item: Any) -> None:
        rule = self.defs.panels.setdefault(name, PanelRule())
        aspect_rule = AspectRule.from_dict(copy.deepcopy(item))

        if aspect_rule is None:
            rule.aspects.pop(aspect, None)
        else:
            rule.aspects[aspect] = aspect_rule

        self.logger.info("Panel condition added", panel=name, aspect=aspect.value)
        self.process_panel(name, aspect)

    def _record_mutation(self, target: str, aspect: str, result: bool) -> None:
        if self.metrics:
            self.metrics.record_mutation(target, aspect, "true" if result else "false")
