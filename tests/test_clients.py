"""Tests for the API client factories and the local-mode logging clients."""

import json
import logging

import pytest
from google.api import metric_pb2
from google.auth.credentials import AnonymousCredentials

from gcloudmon.clients import (
    LoggingGroupServiceClient,
    LoggingMetricServiceClient,
    create_group_client_factory,
    create_group_service_client,
    create_metric_client_factory,
    create_metric_service_client,
)
from gcloudmon.config import Config
from gcloudmon.metrics import TimeSeriesPoint, build_time_series


def _logged_payloads(caplog, marker: str) -> list[dict]:
    return [
        json.loads(record.getMessage()[len(marker):])
        for record in caplog.records
        if record.getMessage().startswith(marker)
    ]


def test_local_mode_factories_return_logging_clients():
    config = Config(project_id="test-project", local_mode=True)

    metric_client = create_metric_client_factory(config)(AnonymousCredentials())
    group_client = create_group_client_factory(config)(AnonymousCredentials())

    assert isinstance(metric_client, LoggingMetricServiceClient)
    assert isinstance(group_client, LoggingGroupServiceClient)


def test_production_factories_build_api_clients():
    config = Config(project_id="test-project")

    assert create_metric_client_factory(config) is create_metric_service_client
    assert create_group_client_factory(config) is create_group_service_client


@pytest.mark.asyncio
async def test_logging_client_logs_time_series(caplog):
    caplog.set_level(logging.INFO)
    series = [
        build_time_series(
            project_id="test-project",
            prefix="custom.googleapis.com",
            point=TimeSeriesPoint(metric_type="requests", value=5, labels={"route": "/"}),
            now="2024-01-15T10:30:00.000000Z",
        ),
        build_time_series(
            project_id="test-project",
            prefix="custom.googleapis.com",
            point=TimeSeriesPoint(metric_type="latency", value=0.5, value_type="DOUBLE"),
            now="2024-01-15T10:30:00.000000Z",
        ),
    ]

    async with LoggingMetricServiceClient() as client:
        await client.create_time_series(name="projects/test-project", time_series=series)

    payloads = _logged_payloads(caplog, "METRIC: ")
    assert len(payloads) == 2
    assert payloads[0]["project_id"] == "test-project"
    assert payloads[0]["name"] == "custom.googleapis.com/requests"
    assert payloads[0]["value"] == 5
    assert payloads[0]["labels"] == {"route": "/"}
    assert payloads[0]["metric_kind"] == "GAUGE"
    assert payloads[0]["resource_type"] == "global"
    assert payloads[0]["timestamp"].startswith("2024-01-15T10:30:00")
    assert payloads[1]["value"] == 0.5


@pytest.mark.asyncio
async def test_logging_client_logs_descriptor_changes(caplog):
    caplog.set_level(logging.INFO)
    descriptor = metric_pb2.MetricDescriptor(
        type="custom.googleapis.com/requests",
        metric_kind=metric_pb2.MetricDescriptor.MetricKind.GAUGE,
        value_type=metric_pb2.MetricDescriptor.ValueType.INT64,
    )
    client = LoggingMetricServiceClient()

    result = await client.create_metric_descriptor(
        name="projects/test-project", metric_descriptor=descriptor
    )
    await client.delete_metric_descriptor(
        name="projects/test-project/metricDescriptors/custom.googleapis.com/requests"
    )

    assert result is descriptor
    created = _logged_payloads(caplog, "CREATE METRIC DESCRIPTOR: ")
    assert created == [
        {
            "project_id": "test-project",
            "type": "custom.googleapis.com/requests",
            "metric_kind": "GAUGE",
            "value_type": "INT64",
            "labels": [],
        }
    ]
    assert any(
        record.getMessage().startswith("DELETE METRIC DESCRIPTOR: projects/test-project/")
        for record in caplog.records
    )


@pytest.mark.asyncio
async def test_logging_clients_return_empty_lists():
    metric_client = LoggingMetricServiceClient()
    group_client = LoggingGroupServiceClient()
    request = {"name": "projects/test-project", "page_size": 5}

    resources = await metric_client.list_monitored_resource_descriptors(
        request=request, retry=None, timeout=None
    )
    descriptors = await metric_client.list_metric_descriptors(
        request=request, retry=None, timeout=None
    )
    groups = await group_client.list_groups(request=request, retry=None, timeout=None)

    assert list(resources.resource_descriptors) == []
    assert list(descriptors.metric_descriptors) == []
    assert list(groups.group) == []
