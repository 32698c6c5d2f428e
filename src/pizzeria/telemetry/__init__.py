"""Process-wide telemetry singletons.

Provides get_dispatcher() / get_metrics() built from settings on first use,
and reset_telemetry() for tests.
"""

from pizzeria.config import get_settings
from pizzeria.telemetry.dispatcher import TelemetryDispatcher
from pizzeria.telemetry.metrics import MetricsAggregator

_dispatcher: TelemetryDispatcher | None = None
_metrics: MetricsAggregator | None = None


def get_dispatcher() -> TelemetryDispatcher:
    global _dispatcher
    if _dispatcher is None:
        settings = get_settings()
        _dispatcher = TelemetryDispatcher(
            max_size=settings.telemetry_queue_size,
            timeout=settings.telemetry_timeout_seconds,
        )
    return _dispatcher


def get_metrics() -> MetricsAggregator:
    global _metrics
    if _metrics is None:
        settings = get_settings()
        _metrics = MetricsAggregator(
            get_dispatcher(),
            url=settings.metrics_url if settings.telemetry_enabled else "",
            api_key=settings.metrics_api_key,
            source=settings.metrics_source,
            flush_interval=settings.metrics_flush_interval_seconds,
        )
    return _metrics


def reset_telemetry() -> None:
    global _dispatcher, _metrics
    _dispatcher = None
    _metrics = None
