"""
Shared metrics configuration for the Dynamic Logic service.
"""

import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class MetricsCollector:
    """Centralized metrics collector for the engine."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up engine metrics."""

        self._metrics["process_total"] = Counter(
            "dynamic_logic_process_total",
            "Total full evaluation passes",
            registry=self.registry
        )

        self._metrics["process_duration_seconds"] = Histogram(
            "dynamic_logic_process_duration_seconds",
            "Full evaluation pass duration in seconds",
            registry=self.registry
        )

        self._metrics["mutations_total"] = Counter(
            "dynamic_logic_mutations_total",
            "Total view mutations issued",
            ["target", "aspect", "result"],
            registry=self.registry
        )

        self._metrics["condition_errors_total"] = Counter(
            "dynamic_logic_condition_errors_total",
            "Leaf conditions that failed to evaluate",
            ["type"],
            registry=self.registry
        )

        self._metrics["unknown_types_total"] = Counter(
            "dynamic_logic_unknown_condition_types_total",
            "Leaf conditions with an unrecognized type",
            ["type"],
            registry=self.registry
        )

    @contextmanager
    def time_process(self):
        """Count and time a full evaluation pass."""
        start_time = time.time()
        try:
            yield
        finally:
            self._metrics["process_total"].inc()
            self._metrics["process_duration_seconds"].observe(time.time() - start_time)

    def record_mutation(self, target: str, aspect: str, result: str):
        """Record a view mutation."""
        self._metrics["mutations_total"].labels(target=target, aspect=aspect, result=result).inc()

    def record_condition_error(self, condition_type: str):
        """Record a leaf condition that raised during evaluation."""
        self._metrics["condition_errors_total"].labels(type=condition_type).inc()

    def record_unknown_type(self, condition_type: str):
        """Record a leaf condition with an unrecognized type."""
        self._metrics["unknown_types_total"].labels(type=condition_type).inc()


_default_collector: Optional[MetricsCollector] = None
_default_lock = threading.Lock()


def get_metrics_collector(
    service_name: str = "dynamic_logic",
    registry: Optional[CollectorRegistry] = None,
) -> MetricsCollector:
    """Get a metrics collector; the default-registry collector is created once."""
    global _default_collector

    if registry is not None:
        return MetricsCollector(service_name, registry)

    with _default_lock:
        if _default_collector is None:
            _default_collector = MetricsCollector(service_name)
        return _default_collector
