"""Request models and payload builders for Cloud Monitoring."""

import enum
import math
from datetime import UTC, datetime
from typing import Annotated, Any

from google.api import label_pb2, metric_pb2
from google.cloud.monitoring_v3 import Point, TimeInterval, TimeSeries, TypedValue
from google.protobuf import timestamp_pb2
from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

DEFAULT_RESOURCE_TYPE = "global"
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueType(str, enum.Enum):
    """Supported point value kinds."""

    BOOL = "BOOL"
    INT64 = "INT64"
    DOUBLE = "DOUBLE"
    STRING = "STRING"

    @property
    def field(self) -> str:
        """Name of the TypedValue field holding a value of this kind."""
        return _VALUE_FIELDS[self]

    def to_proto(self) -> int:
        return metric_pb2.MetricDescriptor.ValueType.Value(self.value)


_VALUE_FIELDS = {
    ValueType.BOOL: "bool_value",
    ValueType.INT64: "int64_value",
    ValueType.DOUBLE: "double_value",
    ValueType.STRING: "string_value",
}


class MetricKind(str, enum.Enum):
    GAUGE = "GAUGE"
    DELTA = "DELTA"
    CUMULATIVE = "CUMULATIVE"

    def to_proto(self) -> int:
        return metric_pb2.MetricDescriptor.MetricKind.Value(self.value)


class LabelValueType(str, enum.Enum):
    STRING = "STRING"
    BOOL = "BOOL"
    INT64 = "INT64"

    def to_proto(self) -> int:
        return label_pb2.LabelDescriptor.ValueType.Value(self.value)


def _upper(value: Any) -> Any:
    return value.upper() if isinstance(value, str) else value


# Enum names are matched case-insensitively, as in "double" or "DOUBLE".
ValueTypeField = Annotated[ValueType, BeforeValidator(_upper)]
MetricKindField = Annotated[MetricKind, BeforeValidator(_upper)]
LabelValueTypeField = Annotated[LabelValueType, BeforeValidator(_upper)]


class _RequestModel(BaseModel):
    # Accept both snake_case and the API's camelCase field names.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LabelDescriptor(_RequestModel):
    key: str
    value_type: LabelValueTypeField = LabelValueType.STRING
    description: str = ""


class MetricDescriptorSpec(_RequestModel):
    """Definition of a custom metric to register."""

    type: str
    name: str = ""
    description: str = ""
    display_name: str = ""
    labels: list[LabelDescriptor] = Field(default_factory=list)
    metric_kind: MetricKindField = MetricKind.GAUGE
    value_type: ValueTypeField = ValueType.INT64


class TimeSeriesPoint(_RequestModel):
    """
    A single value to report for a metric.

    ``value`` is checked against ``value_type``: INT64 accepts integers and
    whole floats within the signed 64-bit range, DOUBLE any number that
    fits a float, BOOL only booleans and STRING only strings. Interval strings
    must be RFC 3339 timestamps.
    """

    metric_type: str
    value: bool | int | float | str = Field(validation_alias=AliasChoices("value", "metricValue"))
    labels: dict[str, str] = Field(default_factory=dict)
    resource_type: str = DEFAULT_RESOURCE_TYPE
    resource_labels: dict[str, str] = Field(default_factory=dict)
    metric_kind: MetricKindField = MetricKind.GAUGE
    value_type: ValueTypeField = ValueType.INT64
    interval_start: str | datetime | None = None
    interval_end: str | datetime | None = None

    @field_validator("interval_start", "interval_end")
    @classmethod
    def _check_interval(cls, value: str | datetime | None) -> str | datetime | None:
        if isinstance(value, str):
            to_timestamp(value)
        return value

    @model_validator(mode="after")
    def _check_value(self) -> "TimeSeriesPoint":
        value = self.value
        is_number = isinstance(value, int | float) and not isinstance(value, bool)

        if self.value_type is ValueType.INT64:
            if not is_number or (isinstance(value, float) and not value.is_integer()):
                raise ValueError(f"INT64 point requires a whole number, got {value!r}")
            if not INT64_MIN <= value <= INT64_MAX:
                raise ValueError(f"INT64 point value out of range, got {value!r}")
            self.value = int(value)
        elif self.value_type is ValueType.DOUBLE:
            if not is_number:
                raise ValueError(f"DOUBLE point requires a number, got {value!r}")
            try:
                self.value = float(value)
            except OverflowError as e:
                raise ValueError(f"DOUBLE point value out of range, got {value!r}") from e
        elif self.value_type is ValueType.BOOL:
            if not isinstance(value, bool):
                raise ValueError(f"BOOL point requires a boolean, got {value!r}")
        elif not isinstance(value, str):
            raise ValueError(f"STRING point requires a string, got {value!r}")
        return self


def infer_value_type(value: Any) -> ValueType:
    """
    Classify a raw value.

    Whole numbers that fit in a signed 64-bit integer map to INT64 and other
    numbers to DOUBLE. Booleans and strings map to BOOL and STRING.
    """
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, int):
        return ValueType.INT64 if INT64_MIN <= value <= INT64_MAX else ValueType.DOUBLE
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and INT64_MIN <= value <= INT64_MAX:
            return ValueType.INT64
        return ValueType.DOUBLE
    if isinstance(value, str):
        return ValueType.STRING
    raise TypeError(f"Unsupported metric value: {value!r}")


def now_timestamp(now: datetime | None = None) -> str:
    """
    Format the current time for a point interval.

    Millisecond precision, padded to microseconds:
    ``YYYY-MM-DDTHH:MM:SS.mmm000Z``.
    """
    now = (now or datetime.now(UTC)).astimezone(UTC)
    return f"{now.strftime('%Y-%m-%dT%H:%M:%S')}.{now.microsecond // 1000:03d}000Z"


def to_timestamp(value: str | datetime) -> timestamp_pb2.Timestamp:
    """Convert an RFC 3339 string or datetime to a protobuf Timestamp."""
    timestamp = timestamp_pb2.Timestamp()
    if isinstance(value, datetime):
        if value.tzinfo:
            value = value.astimezone(UTC).replace(tzinfo=None)
        timestamp.FromDatetime(value)
    else:
        timestamp.FromJsonString(value)
    return timestamp


def qualified_metric_type(prefix: str, metric_type: str) -> str:
    """Namespace a metric type under the configured prefix."""
    return f"{prefix}/{metric_type}"


def build_metric_descriptor(prefix: str, spec: MetricDescriptorSpec) -> metric_pb2.MetricDescriptor:
    """
    Build a MetricDescriptor for registration.

    Args:
        prefix: Metric type namespace
        spec: Metric definition

    Returns:
        MetricDescriptor with its type namespaced under prefix
    """
    return metric_pb2.MetricDescriptor(
        name=spec.name,
        description=spec.description,
        display_name=spec.display_name,
        type=qualified_metric_type(prefix, spec.type),
        labels=[
            label_pb2.LabelDescriptor(
                key=label.key,
                value_type=label.value_type.to_proto(),
                description=label.description,
            )
            for label in spec.labels
        ],
        metric_kind=spec.metric_kind.to_proto(),
        value_type=spec.value_type.to_proto(),
    )


def build_time_series(
    *,
    project_id: str,
    prefix: str,
    point: TimeSeriesPoint,
    now: str,
) -> TimeSeries:
    """
    Build a TimeSeries holding a single point.

    Args:
        project_id: Project ID, used as the project_id label of global resources
        prefix: Metric type namespace
        point: Point to report
        now: Timestamp used for interval bounds the point leaves unset

    Returns:
        TimeSeries ready for create_time_series
    """
    series = TimeSeries()
    series.metric.type = qualified_metric_type(prefix, point.metric_type)
    series.metric.labels.update(point.labels)
    series.resource.type = point.resource_type
    series.resource.labels.update(point.resource_labels)
    if point.resource_type == DEFAULT_RESOURCE_TYPE and "project_id" not in series.resource.labels:
        series.resource.labels["project_id"] = project_id
    series.metric_kind = point.metric_kind.to_proto()
    series.value_type = point.value_type.to_proto()

    interval = TimeInterval(
        start_time=to_timestamp(point.interval_start or now),
        end_time=to_timestamp(point.interval_end or now),
    )
    value = TypedValue(**{point.value_type.field: point.value})
    series.points = [Point(interval=interval, value=value)]
    return series


__all__ = [
    "DEFAULT_RESOURCE_TYPE",
    "LabelDescriptor",
    "LabelValueType",
    "MetricDescriptorSpec",
    "MetricKind",
    "TimeSeriesPoint",
    "ValueType",
    "build_metric_descriptor",
    "build_time_series",
    "infer_value_type",
    "now_timestamp",
    "qualified_metric_type",
    "to_timestamp",
]
