"""
Application Metrics

Process-local counters and timings for tax computation, template fetches and
package assembly. Nothing here is persisted; values reset on restart.
"""

import time
from collections import deque
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Deque, Dict, Iterable
import structlog

logger = structlog.get_logger()

# Timing samples kept per operation
MAX_TIMING_SAMPLES = 1000

COUNTERS = (
    "api_requests",
    "tax_computations",
    "template_fetches",
    "template_field_misses",
    "form_fills",
    "package_assemblies",
    "net_underpayment_refusals",
    "errors",
)


def summarize_timings(timings: Iterable[float]) -> Dict[str, float]:
    """count / avg / min / max / p95 in milliseconds"""
    ordered = sorted(timings)
    if not ordered:
        return {}
    return {
        "count": len(ordered),
        "avg_ms": sum(ordered) / len(ordered),
        "min_ms": ordered[0],
        "max_ms": ordered[-1],
        "p95_ms": ordered[min(len(ordered) - 1, int(len(ordered) * 0.95))],
    }


class MetricsCollector:
    """Counters, operation timings, error counts and per-product package stats"""

    def __init__(self):
        self.reset()

    def reset(self):
        """Drop all collected values"""
        self.metrics: Dict[str, int] = {name: 0 for name in COUNTERS}
        self.timing_metrics: Dict[str, Deque[float]] = {}
        self.error_counts: Dict[str, int] = {}
        self.package_stats: Dict[str, Dict[str, int]] = {}

    def increment_counter(self, metric_name: str, value: int = 1):
        self.metrics[metric_name] = self.metrics.get(metric_name, 0) + value
        logger.info("Metric incremented", metric=metric_name, value=value)

    def record_timing(self, operation: str, duration_ms: float):
        samples = self.timing_metrics.setdefault(operation, deque(maxlen=MAX_TIMING_SAMPLES))
        samples.append(duration_ms)
        logger.info("Timing recorded", operation=operation, duration_ms=round(duration_ms, 2))

    def record_error(self, error_type: str, error_message: str):
        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1
        self.metrics["errors"] += 1

        logger.error("Error recorded",
                    error_type=error_type,
                    error_message=error_message,
                    count=self.error_counts[error_type])

    def record_package(self, product: str, pages: int, placeholders: int = 0):
        """One assembled package for a product"""
        stats = self.package_stats.setdefault(product, {"packages": 0, "pages": 0, "placeholders": 0})
        stats["packages"] += 1
        stats["pages"] += pages
        stats["placeholders"] += placeholders

    def get_metrics_summary(self) -> Dict[str, Any]:
        timing_stats = {
            operation: summarize_timings(timings)
            for operation, timings in self.timing_metrics.items()
            if timings
        }

        return {
            "counters": dict(self.metrics),
            "timing_stats": timing_stats,
            "error_counts": dict(self.error_counts),
            "packages_by_product": {product: dict(stats) for product, stats in self.package_stats.items()},
            "collected_at": datetime.now(timezone.utc).isoformat()
        }


# Global metrics collector
metrics_collector = MetricsCollector()


def track_timing(operation_name: str):
    """Record how long a coroutine takes; failures land under "<name>_failed" and in error counts"""
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                metrics_collector.record_timing(f"{operation_name}_failed", (time.perf_counter() - start_time) * 1000)
                metrics_collector.record_error(type(e).__name__, str(e))
                raise
            metrics_collector.record_timing(operation_name, (time.perf_counter() - start_time) * 1000)
            return result
        return wrapper
    return decorator


def track_counter(metric_name: str):
    """Count successful and failed calls of a coroutine"""
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except Exception:
                metrics_collector.increment_counter(f"{metric_name}_failed")
                raise
            metrics_collector.increment_counter(metric_name)
            return result
        return wrapper
    return decorator
