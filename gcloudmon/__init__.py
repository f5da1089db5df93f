"""Cloud Monitoring metric client."""

from gcloudmon.config import CUSTOM_METRIC_DOMAIN, Config
from gcloudmon.credentials import MONITORING_SCOPES
from gcloudmon.errors import AuthError, MonitoringError, RemoteAPIError, TimeSeriesWriteError
from gcloudmon.metrics import (
    LabelDescriptor,
    MetricDescriptorSpec,
    MetricKind,
    TimeSeriesPoint,
    ValueType,
)
from gcloudmon.monitoring import MonitoringClient

__all__ = [
    "CUSTOM_METRIC_DOMAIN",
    "MONITORING_SCOPES",
    "AuthError",
    "Config",
    "LabelDescriptor",
    "MetricDescriptorSpec",
    "MetricKind",
    "MonitoringClient",
    "MonitoringError",
    "RemoteAPIError",
    "TimeSeriesPoint",
    "TimeSeriesWriteError",
    "ValueType",
]
