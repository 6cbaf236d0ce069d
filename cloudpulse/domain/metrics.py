"""
Instance metric domain models

Provides:
    - MetricValue: latest datapoint of one CloudWatch series
    - MetricUnavailable: series returned no datapoints
    - InstanceMetrics: the three monitored series for one EC2 instance

Each series is a tagged variant (``MetricValue | MetricUnavailable``). The
``"N/A"`` sentinel only appears when serializing for the dashboard.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

NOT_AVAILABLE = "N/A"

CPU_UTILIZATION = "CPUUtilization"
NETWORK_IN = "NetworkIn"
NETWORK_OUT = "NetworkOut"

MONITORED_METRICS = (CPU_UTILIZATION, NETWORK_IN, NETWORK_OUT)


def format_timestamp(timestamp: datetime) -> str:
    """
    Format a datapoint timestamp as RFC3339 in UTC.

    Naive datetimes are treated as UTC.

    Example:
        >>> format_timestamp(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
        '2024-05-01T12:00:00Z'
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class MetricValue:
    """
    Latest datapoint of a series.

    Attributes:
        value: Datapoint value (percent for CPU, bytes for network)
        timestamp: When the datapoint was recorded
    """

    value: float
    timestamp: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, datetime):
            raise TypeError(f"timestamp must be datetime, got {type(self.timestamp)}")

    def wire_value(self) -> float:
        return self.value

    def wire_timestamp(self) -> str:
        return format_timestamp(self.timestamp)


@dataclass(frozen=True)
class MetricUnavailable:
    """A series that returned no datapoints in the query window."""

    def wire_value(self) -> str:
        return NOT_AVAILABLE

    def wire_timestamp(self) -> str:
        return NOT_AVAILABLE


MetricReading = MetricValue | MetricUnavailable


@dataclass(frozen=True)
class InstanceMetrics:
    """
    Latest CPU and network readings for one EC2 instance.

    Attributes:
        instance_id: EC2 instance the readings belong to
        readings: Reading per metric name in MONITORED_METRICS
        message: Informational note (set when CloudWatch returned no series at all)

    Example:
        metrics = InstanceMetrics(instance_id="i-0abc", readings={CPU_UTILIZATION: MetricUnavailable()})
        metrics.to_dict()["CPUUtilization"]  # "N/A"
    """

    instance_id: str
    readings: dict[str, MetricReading] = field(default_factory=dict)
    message: str | None = None

    def reading(self, metric_name: str) -> MetricReading:
        return self.readings.get(metric_name, MetricUnavailable())

    @property
    def has_data(self) -> bool:
        return any(isinstance(self.reading(name), MetricValue) for name in MONITORED_METRICS)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the dashboard JSON shape.

        Every monitored metric yields a value field and a ``<name>Timestamp``
        field; unavailable series carry ``"N/A"`` in both.
        """
        payload: dict[str, Any] = {"InstanceID": self.instance_id}
        for name in MONITORED_METRICS:
            reading = self.reading(name)
            payload[name] = reading.wire_value()
            payload[f"{name}Timestamp"] = reading.wire_timestamp()

        if self.message:
            payload["message"] = self.message

        return payload
