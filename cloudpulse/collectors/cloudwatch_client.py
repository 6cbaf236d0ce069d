"""
CloudWatch EC2 Metrics Client

Fetches the latest CPU utilization and network traffic datapoints for one EC2
instance with a single GetMetricData call.

Usage:
    from cloudpulse.collectors.cloudwatch_client import CloudWatchMetricsClient, create_cloudwatch_client

    client = CloudWatchMetricsClient(create_cloudwatch_client("us-east-1"))
    metrics = client.fetch_instance_metrics("i-0123456789abcdef0")
    metrics.to_dict()
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cloudpulse.collectors.errors import ClientUninitializedError, IdentityMissingError, MetricsQueryError
from cloudpulse.core import get_logger
from cloudpulse.domain import (
    CPU_UTILIZATION,
    MONITORED_METRICS,
    NETWORK_IN,
    NETWORK_OUT,
    InstanceMetrics,
    MetricReading,
    MetricUnavailable,
    MetricValue,
)

logger = get_logger(__name__)

EC2_NAMESPACE = "AWS/EC2"
LOOKBACK = timedelta(minutes=10)
PERIOD_SECONDS = 300

NO_DATA_MESSAGE = (
    "No CloudWatch metric data available for this instance in the last 10 minutes. "
    "Basic monitoring publishes EC2 metrics every 5 minutes."
)

# GetMetricData query id -> (metric name, statistic)
METRIC_QUERIES = {
    "cpu_utilization": (CPU_UTILIZATION, "Average"),
    "network_in": (NETWORK_IN, "Sum"),
    "network_out": (NETWORK_OUT, "Sum"),
}


def create_cloudwatch_client(region: str) -> Any:
    """Create a boto3 CloudWatch client using the default credential chain."""
    session = boto3.Session(region_name=region)
    return session.client("cloudwatch")


class CloudWatchMetricsClient:
    """
    Reads the latest EC2 metrics from CloudWatch.

    The boto3 client is created once and shared by concurrent requests.
    """

    def __init__(self, cloudwatch: Any | None):
        self.cloudwatch = cloudwatch

    def _build_queries(self, instance_id: str) -> list[dict[str, Any]]:
        dimensions = [{"Name": "InstanceId", "Value": instance_id}]
        return [
            {
                "Id": query_id,
                "MetricStat": {
                    "Metric": {
                        "Namespace": EC2_NAMESPACE,
                        "MetricName": metric_name,
                        "Dimensions": dimensions,
                    },
                    "Period": PERIOD_SECONDS,
                    "Stat": statistic,
                },
                "ReturnData": True,
            }
            for query_id, (metric_name, statistic) in METRIC_QUERIES.items()
        ]

    @staticmethod
    def _latest_reading(result: dict[str, Any]) -> MetricReading:
        # ScanBy=TimestampDescending puts the newest datapoint first
        values = result.get("Values") or []
        timestamps = result.get("Timestamps") or []
        if not values or not timestamps:
            return MetricUnavailable()
        return MetricValue(value=float(values[0]), timestamp=timestamps[0])

    def fetch_instance_metrics(self, instance_id: str, now: datetime | None = None) -> InstanceMetrics:
        """
        Fetch the latest datapoint of each monitored metric.

        Args:
            instance_id: EC2 instance to query
            now: End of the query window (defaults to the current UTC time)

        Returns:
            InstanceMetrics; series without datapoints are MetricUnavailable

        Raises:
            ClientUninitializedError: No CloudWatch client configured
            IdentityMissingError: instance_id is empty
            MetricsQueryError: CloudWatch call failed
        """
        if self.cloudwatch is None:
            raise ClientUninitializedError("CloudWatch client not initialized")
        if not instance_id:
            raise IdentityMissingError("EC2 instance ID not available; cannot query CloudWatch metrics")

        end = now or datetime.now(timezone.utc)
        start = end - LOOKBACK

        try:
            response = self.cloudwatch.get_metric_data(
                MetricDataQueries=self._build_queries(instance_id),
                StartTime=start,
                EndTime=end,
                ScanBy="TimestampDescending",
            )
        except (ClientError, BotoCoreError) as e:
            raise MetricsQueryError(f"Failed to fetch CloudWatch metrics: {e}") from e

        results = response.get("MetricDataResults") or []
        by_metric = {
            METRIC_QUERIES[result["Id"]][0]: self._latest_reading(result)
            for result in results
            if result.get("Id") in METRIC_QUERIES
        }
        readings = {name: by_metric.get(name, MetricUnavailable()) for name in MONITORED_METRICS}

        logger.debug(
            "CloudWatch metrics fetched",
            extra={"instance_id": instance_id, "series": len(results)},
        )

        return InstanceMetrics(
            instance_id=instance_id,
            readings=readings,
            message=None if results else NO_DATA_MESSAGE,
        )
