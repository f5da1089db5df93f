"""Cloud Monitoring facade.

``MonitoringClient`` wraps the metric and group services of the Cloud
Monitoring v3 API. Every public call fetches fresh credentials, builds a client
bound to them and sends exactly one request. Responses are returned as the API
produced them; failures are raised as ``RemoteAPIError`` without retries.

Calls share no mutable state, so they may run concurrently. Their completion
order is undefined.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from google.api import metric_pb2
from google.api_core.exceptions import GoogleAPICallError
from google.auth import credentials as ga_credentials
from google.cloud.monitoring_v3 import TimeSeries

from gcloudmon.clients import (
    GroupClientFactory,
    MetricClientFactory,
    create_group_client_factory,
    create_metric_client_factory,
)
from gcloudmon.config import Config
from gcloudmon.credentials import CredentialsProvider, create_credentials_provider
from gcloudmon.errors import RemoteAPIError, TimeSeriesWriteError
from gcloudmon.metrics import (
    DEFAULT_RESOURCE_TYPE,
    MetricDescriptorSpec,
    MetricKind,
    TimeSeriesPoint,
    ValueType,
    build_metric_descriptor,
    build_time_series,
    infer_value_type,
    now_timestamp,
    qualified_metric_type,
)

RESOURCE_DESCRIPTORS_PAGE_SIZE = 500
METRIC_DESCRIPTORS_PAGE_SIZE = 5
GROUPS_PAGE_SIZE = 10


class MonitoringClient:
    """Reads and writes Cloud Monitoring metrics for a single project."""

    def __init__(
        self,
        config: Config,
        credentials_provider: CredentialsProvider | None = None,
        metric_client_factory: MetricClientFactory | None = None,
        group_client_factory: GroupClientFactory | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Application configuration (project, prefix, credentials source)
            credentials_provider: Source of per-request credentials; defaults to
                one chosen from the config
            metric_client_factory: Builds a metric service client from credentials
            group_client_factory: Builds a group service client from credentials
        """
        self._project_id = config.project_id
        self._prefix = config.prefix
        self.credentials_provider = credentials_provider or create_credentials_provider(config)
        self.metric_client_factory = metric_client_factory or create_metric_client_factory(config)
        self.group_client_factory = group_client_factory or create_group_client_factory(config)

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def project_name(self) -> str:
        return f"projects/{self._project_id}"

    async def acquire_credentials(self) -> ga_credentials.Credentials:
        """Fetch credentials for a single request. Nothing is cached."""
        return await self.credentials_provider.acquire()

    async def _call(self, client_factory, method: str, **kwargs: Any) -> Any:
        credentials = await self.acquire_credentials()
        client = client_factory(credentials)
        logging.debug(f"Calling {method} for {self.project_name}")
        async with client:
            try:
                # retry=None turns off the client library's built-in retry policy.
                return await getattr(client, method)(**kwargs, retry=None, timeout=None)
            except GoogleAPICallError as e:
                raise RemoteAPIError(e) from e

    async def list_monitored_resource_descriptors(self) -> Any:
        """List the monitored resource descriptors of the project (first page only)."""
        return await self._call(
            self.metric_client_factory,
            "list_monitored_resource_descriptors",
            request={"name": self.project_name, "page_size": RESOURCE_DESCRIPTORS_PAGE_SIZE},
        )

    async def list_metric_descriptors(
        self,
        filter: str | None = None,
        page_size: int = METRIC_DESCRIPTORS_PAGE_SIZE,
    ) -> Any:
        """
        List metric descriptors of the project (first page only).

        Args:
            filter: Optional monitoring filter expression
            page_size: Maximum number of descriptors to return
        """
        request = {"name": self.project_name, "page_size": page_size}
        if filter:
            request["filter"] = filter
        return await self._call(
            self.metric_client_factory, "list_metric_descriptors", request=request
        )

    async def list_groups(self) -> Any:
        return await self._call(
            self.group_client_factory,
            "list_groups",
            request={"name": self.project_name, "page_size": GROUPS_PAGE_SIZE},
        )

    async def create_metric(
        self, spec: MetricDescriptorSpec | Mapping[str, Any]
    ) -> metric_pb2.MetricDescriptor:
        """
        Register a custom metric descriptor.

        Args:
            spec: Metric definition; its type is namespaced under the prefix

        Returns:
            The created MetricDescriptor
        """
        if not isinstance(spec, MetricDescriptorSpec):
            spec = MetricDescriptorSpec.model_validate(spec)
        descriptor = build_metric_descriptor(self._prefix, spec)
        return await self._call(
            self.metric_client_factory,
            "create_metric_descriptor",
            name=self.project_name,
            metric_descriptor=descriptor,
        )

    async def delete_metric(self, metric_type: str) -> None:
        metric = qualified_metric_type(self._prefix, metric_type)
        name = f"{self.project_name}/metricDescriptors/{metric}"
        return await self._call(self.metric_client_factory, "delete_metric_descriptor", name=name)

    async def set_value(
        self,
        metric_type: str,
        value: bool | int | float | str,
        *,
        labels: Mapping[str, str] | None = None,
        resource_type: str = DEFAULT_RESOURCE_TYPE,
        resource_labels: Mapping[str, str] | None = None,
        metric_kind: MetricKind | str = MetricKind.GAUGE,
        value_type: ValueType | str | None = None,
        interval_start: str | datetime | None = None,
        interval_end: str | datetime | None = None,
    ) -> None:
        """
        Write one point to a metric.

        When value_type is omitted it is inferred from the value: whole
        numbers are written as INT64 and other numbers as DOUBLE.

        Args:
            metric_type: Metric type, without the prefix
            value: Point value
            labels: Metric labels
            resource_type: Monitored resource type
            resource_labels: Monitored resource labels
            metric_kind: GAUGE, DELTA or CUMULATIVE
            value_type: Explicit value kind, overriding inference
            interval_start: Interval start; defaults to now
            interval_end: Interval end; defaults to now
        """
        point = TimeSeriesPoint(
            metric_type=metric_type,
            value=value,
            labels=dict(labels or {}),
            resource_type=resource_type,
            resource_labels=dict(resource_labels or {}),
            metric_kind=metric_kind,
            value_type=value_type or infer_value_type(value),
            interval_start=interval_start,
            interval_end=interval_end,
        )
        series = build_time_series(
            project_id=self._project_id,
            prefix=self._prefix,
            point=point,
            now=now_timestamp(),
        )
        return await self._call(
            self.metric_client_factory,
            "create_time_series",
            name=self.project_name,
            time_series=[series],
        )

    async def set_values(
        self, points: Iterable[TimeSeriesPoint | Mapping[str, Any]]
    ) -> None:
        """
        Write a batch of points, possibly for different metrics, in one request.

        Points without a value_type are written as INT64.

        Args:
            points: TimeSeriesPoint models or mappings with the same fields
                (snake_case or camelCase keys)

        Raises:
            TimeSeriesWriteError: If the API rejects the request; carries the
                time series that were sent
        """
        points = [
            point if isinstance(point, TimeSeriesPoint) else TimeSeriesPoint.model_validate(point)
            for point in points
        ]
        now = now_timestamp()
        time_series: list[TimeSeries] = [
            build_time_series(
                project_id=self._project_id, prefix=self._prefix, point=point, now=now
            )
            for point in points
        ]
        try:
            return await self._call(
                self.metric_client_factory,
                "create_time_series",
                name=self.project_name,
                time_series=time_series,
            )
        except RemoteAPIError as e:
            raise TimeSeriesWriteError(e.error, time_series) from e.error


__all__ = ["MonitoringClient"]
