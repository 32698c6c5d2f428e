"""Operational metrics.

:class:`MetricsAggregator` keeps its series as labelled ``prometheus_client``
gauges in a private :class:`CollectorRegistry` and flushes the collected
samples as an OTLP-JSON payload on a fixed interval. Counting series are
set back to zero on every flush; the active-user gauge is not.
"""

import asyncio
import os
import time

from prometheus_client import CollectorRegistry, Gauge

from pizzeria.telemetry.dispatcher import TelemetryDispatcher
from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)

TRACKED_METHODS = ("GET", "POST", "PUT", "DELETE")
AUTH_STATUSES = ("success", "fail")


def cpu_percentage() -> float:
    try:
        return round(os.getloadavg()[0] / (os.cpu_count() or 1) * 100, 2)
    except (AttributeError, OSError):
        return 0.0


def memory_percentage() -> float:
    try:
        total = os.sysconf("SC_PHYS_PAGES")
        available = os.sysconf("SC_AVPHYS_PAGES")
    except (AttributeError, ValueError, OSError):
        return 0.0
    if total <= 0:
        return 0.0
    return round((total - available) / total * 100, 2)


def _data_point(value, attributes: dict) -> dict:
    point = {
        "timeUnixNano": time.time_ns(),
        "attributes": [{"key": key, "value": {"stringValue": str(val)}} for key, val in attributes.items()],
    }
    if isinstance(value, int):
        point["asInt"] = value
    else:
        point["asDouble"] = value
    return point


def otlp_payload(series: list[tuple[str, float, dict]], source: str) -> dict:
    """Wrap ``(name, value, attributes)`` series into an OTLP resourceMetrics body."""
    return {
        "resourceMetrics": [
            {
                "scopeMetrics": [
                    {
                        "metrics": [
                            {
                                "name": name,
                                "unit": "1",
                                "sum": {
                                    "dataPoints": [_data_point(value, {**attrs, "source": source})],
                                    "aggregationTemporality": "AGGREGATION_TEMPORALITY_CUMULATIVE",
                                    "isMonotonic": True,
                                },
                            }
                            for name, value, attrs in series
                        ]
                    }
                ]
            }
        ]
    }


class MetricsAggregator:
    def __init__(
        self,
        dispatcher: TelemetryDispatcher,
        url: str = "",
        api_key: str = "",
        source: str = "pizzeria-service",
        flush_interval: float = 30.0,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.url = url
        self.api_key = api_key
        self.source = source
        self.flush_interval = flush_interval
        self.registry = registry or CollectorRegistry()
        self._flush_task: asyncio.Task | None = None
        self._init_metrics()
        self._reset_counters()

    def _init_metrics(self) -> None:
        self.http_requests = Gauge(
            "http_requests_total",
            "Requests received since the last flush",
            ["method"],
            registry=self.registry,
        )
        self.auth_attempts = Gauge(
            "auth_attempts_total",
            "Authentication attempts since the last flush",
            ["status"],
            registry=self.registry,
        )
        self.pizzas_sold = Gauge("pizza_sold_total", "Pizzas sold since the last flush", registry=self.registry)
        self.creation_failures = Gauge(
            "pizza_creation_failures_total",
            "Factory rejections since the last flush",
            registry=self.registry,
        )
        self.revenue = Gauge("revenue_total", "Revenue since the last flush", registry=self.registry)
        self.active_user_gauge = Gauge("active_users", "Users currently logged in", registry=self.registry)

        self.cpu = Gauge("cpu_percentage", "Load average over CPU count", registry=self.registry)
        self.cpu.set_function(cpu_percentage)
        self.memory = Gauge("memory_percentage", "Physical memory in use", registry=self.registry)
        self.memory.set_function(memory_percentage)

        self._series = {
            "http_requests_total": self.http_requests,
            "auth_attempts_total": self.auth_attempts,
            "pizza_sold_total": self.pizzas_sold,
            "pizza_creation_failures_total": self.creation_failures,
            "revenue_total": self.revenue,
        }

    def _reset_counters(self) -> None:
        for method in TRACKED_METHODS:
            self.http_requests.labels(method=method).set(0)
        for status in AUTH_STATUSES:
            self.auth_attempts.labels(status=status).set(0)
        for gauge in (self.pizzas_sold, self.creation_failures, self.revenue):
            gauge.set(0)

    @property
    def active_users(self) -> int:
        return int(self.registry.get_sample_value("active_users") or 0)

    def increment(self, name: str, amount: float = 1, **attrs) -> None:
        gauge = self._series[name]
        (gauge.labels(**attrs) if attrs else gauge).inc(amount)

    def observe(self, name: str, value: float, **attrs) -> None:
        """Ship a single observation immediately instead of aggregating it."""
        self._ship([(name, value, attrs)])

    def value(self, name: str, **attrs) -> float:
        return self.registry.get_sample_value(name, attrs) or 0

    def track_request(self, method: str, path: str, latency_ms: float) -> None:
        if method.upper() in TRACKED_METHODS:
            self.increment("http_requests_total", method=method.upper())
        self.observe("service_latency_ms", round(latency_ms, 3), endpoint=path, method=method.upper())

    def track_auth_attempt(self, success: bool) -> None:
        self.increment("auth_attempts_total", status="success" if success else "fail")
        if success:
            self.active_user_gauge.inc()

    def track_logout(self) -> None:
        if self.active_users > 0:
            self.active_user_gauge.dec()

    def track_pizza_order(self, success: bool, count: int = 0, revenue: float = 0.0) -> None:
        if success:
            self.increment("pizza_sold_total", count)
            self.increment("revenue_total", revenue)
        else:
            self.increment("pizza_creation_failures_total")

    def snapshot(self) -> dict:
        return {
            "requestsByMethod": {m: int(self.value("http_requests_total", method=m)) for m in TRACKED_METHODS},
            "activeUsers": self.active_users,
            "authAttempts": {s: int(self.value("auth_attempts_total", status=s)) for s in AUTH_STATUSES},
            "pizzas": {
                "sold": int(self.value("pizza_sold_total")),
                "creationFailures": int(self.value("pizza_creation_failures_total")),
                "revenue": round(self.value("revenue_total"), 4),
            },
        }

    def collect(self) -> list[tuple[str, float, dict]]:
        """Read every sample in the registry as ``(name, value, labels)``.

        Revenue is converted to cents and whole-number samples become ints.
        """
        series = []
        for family in self.registry.collect():
            for sample in family.samples:
                value = sample.value
                if sample.name == "revenue_total":
                    value = round(value * 100)
                elif float(value).is_integer() and sample.name not in ("cpu_percentage", "memory_percentage"):
                    value = int(value)
                series.append((sample.name, value, dict(sample.labels)))
        return series

    def flush(self) -> list[tuple[str, float, dict]]:
        """Ship the collected series, then zero the counting series."""
        series = self.collect()
        self._reset_counters()
        self._ship(series)
        return series

    def _ship(self, series) -> None:
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        self.dispatcher.submit(self.url, otlp_payload(series, self.source), headers)

    @property
    def running(self) -> bool:
        return self._flush_task is not None

    async def start(self) -> None:
        if self._flush_task is None:
            self._flush_task = asyncio.create_task(self._flush_periodically())

    async def stop(self) -> None:
        if self._flush_task is None:
            return
        self._flush_task.cancel()
        try:
            await self._flush_task
        except asyncio.CancelledError:
            pass
        self._flush_task = None
        self.flush()

    async def _flush_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.flush_interval)
            self.flush()
            logger.debug("metrics_flushed", dropped=self.dispatcher.dropped)
