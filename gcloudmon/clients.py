"""Cloud Monitoring API client factories."""

import json
import logging
from collections.abc import Callable
from typing import Any

from google.api import metric_pb2
from google.auth import credentials as ga_credentials
from google.cloud import monitoring_v3
from google.cloud.monitoring_v3 import TypedValue

from gcloudmon.config import Config

MetricClientFactory = Callable[[ga_credentials.Credentials], Any]
GroupClientFactory = Callable[[ga_credentials.Credentials], Any]


class LoggingMetricServiceClient:
    """
    Stand-in for MetricServiceAsyncClient that logs writes instead of calling GCP.

    List calls return empty responses.
    """

    async def __aenter__(self) -> "LoggingMetricServiceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def list_monitored_resource_descriptors(
        self, *, request: dict, retry=None, timeout=None
    ) -> monitoring_v3.ListMonitoredResourceDescriptorsResponse:
        logging.info(f"LIST monitored resource descriptors: {json.dumps(request)}")
        return monitoring_v3.ListMonitoredResourceDescriptorsResponse()

    async def list_metric_descriptors(
        self, *, request: dict, retry=None, timeout=None
    ) -> monitoring_v3.ListMetricDescriptorsResponse:
        logging.info(f"LIST metric descriptors: {json.dumps(request)}")
        return monitoring_v3.ListMetricDescriptorsResponse()

    async def create_metric_descriptor(
        self,
        *,
        name: str,
        metric_descriptor: metric_pb2.MetricDescriptor,
        retry=None,
        timeout=None,
    ) -> metric_pb2.MetricDescriptor:
        descriptor_data = {
            "project_id": name.replace("projects/", ""),
            "type": metric_descriptor.type,
            "metric_kind": metric_pb2.MetricDescriptor.MetricKind.Name(
                metric_descriptor.metric_kind
            ),
            "value_type": metric_pb2.MetricDescriptor.ValueType.Name(
                metric_descriptor.value_type
            ),
            "labels": [label.key for label in metric_descriptor.labels],
        }
        logging.info(f"CREATE METRIC DESCRIPTOR: {json.dumps(descriptor_data)}")
        return metric_descriptor

    async def delete_metric_descriptor(self, *, name: str, retry=None, timeout=None) -> None:
        logging.info(f"DELETE METRIC DESCRIPTOR: {name}")

    async def create_time_series(
        self, *, name: str, time_series: list, retry=None, timeout=None
    ) -> None:
        """Log metric data instead of sending to GCP."""
        for ts in time_series:
            timestamp_str = None
            value = None
            if ts.points:
                point = ts.points[0]
                end_time = point.interval.end_time
                if end_time is not None:
                    timestamp_str = end_time.isoformat()
                kind = TypedValue.pb(point.value).WhichOneof("value")
                if kind is not None:
                    value = getattr(point.value, kind)

            metric_data = {
                "metric_kind": metric_pb2.MetricDescriptor.MetricKind.Name(int(ts.metric_kind)),
                "project_id": name.replace("projects/", ""),
                "name": ts.metric.type,
                "value": value,
                "labels": dict(ts.metric.labels),
                "resource_type": ts.resource.type,
                "timestamp": timestamp_str,
            }
            logging.info(f"METRIC: {json.dumps(metric_data)}")


class LoggingGroupServiceClient:
    """Stand-in for GroupServiceAsyncClient; returns no groups."""

    async def __aenter__(self) -> "LoggingGroupServiceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def list_groups(
        self, *, request: dict, retry=None, timeout=None
    ) -> monitoring_v3.ListGroupsResponse:
        logging.info(f"LIST groups: {json.dumps(request)}")
        return monitoring_v3.ListGroupsResponse()


def create_metric_service_client(
    credentials: ga_credentials.Credentials,
) -> monitoring_v3.MetricServiceAsyncClient:
    return monitoring_v3.MetricServiceAsyncClient(credentials=credentials)


def create_group_service_client(
    credentials: ga_credentials.Credentials,
) -> monitoring_v3.GroupServiceAsyncClient:
    return monitoring_v3.GroupServiceAsyncClient(credentials=credentials)


def create_metric_client_factory(config: Config) -> MetricClientFactory:
    """
    Create a metric service client factory appropriate for the current mode.

    In local mode, the factory returns a client that logs instead of calling GCP.
    In production mode, it returns a MetricServiceAsyncClient bound to the
    credentials it is given.

    Args:
        config: Application configuration

    Returns:
        Callable building a client from credentials
    """
    if config.local_mode:
        return lambda credentials: LoggingMetricServiceClient()
    return create_metric_service_client


def create_group_client_factory(config: Config) -> GroupClientFactory:
    """Create a group service client factory appropriate for the current mode."""
    if config.local_mode:
        return lambda credentials: LoggingGroupServiceClient()
    return create_group_service_client


__all__ = [
    "LoggingGroupServiceClient",
    "LoggingMetricServiceClient",
    "create_group_client_factory",
    "create_group_service_client",
    "create_metric_client_factory",
    "create_metric_service_client",
]
