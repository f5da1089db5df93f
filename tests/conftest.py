"""Pytest configuration and shared fixtures."""

import pytest
from google.auth.credentials import AnonymousCredentials
from google.cloud import monitoring_v3
from pytest_mock import MockerFixture

from gcloudmon.config import Config
from gcloudmon.credentials import CredentialsProvider
from gcloudmon.monitoring import MonitoringClient

PROJECT_ID = "test-project"
PREFIX = "custom.googleapis.com"


class CountingCredentialsProvider(CredentialsProvider):
    """Credentials provider that records how often credentials were fetched."""

    def __init__(self):
        self.calls = 0

    async def acquire(self):
        self.calls += 1
        return AnonymousCredentials()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment out of Config."""
    for name in (
        "GCLOUDMON_PROJECT_ID",
        "GOOGLE_CLOUD_PROJECT",
        "GCLOUDMON_PREFIX",
        "GCLOUDMON_KEY_FILENAME",
        "GCLOUDMON_LOCAL_MODE",
        "LOCAL_MODE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="function")
def config():
    """Fixture that provides a production-mode configuration."""
    return Config(project_id=PROJECT_ID)


@pytest.fixture(scope="function")
def credentials_provider():
    return CountingCredentialsProvider()


@pytest.fixture(scope="function")
def mock_metric_client(mocker: MockerFixture):
    """
    Fixture that provides a mocked MetricServiceAsyncClient.

    Cloud Monitoring has no emulator, so requests are captured on the mock
    and inspected by the tests.
    """
    return mocker.MagicMock(spec=monitoring_v3.MetricServiceAsyncClient)


@pytest.fixture(scope="function")
def mock_group_client(mocker: MockerFixture):
    """Fixture that provides a mocked GroupServiceAsyncClient."""
    return mocker.MagicMock(spec=monitoring_v3.GroupServiceAsyncClient)


@pytest.fixture(scope="function")
def monitoring(config, credentials_provider, mock_metric_client, mock_group_client):
    """Fixture that provides a MonitoringClient wired to the mocked API clients."""
    return MonitoringClient(
        config,
        credentials_provider=credentials_provider,
        metric_client_factory=lambda credentials: mock_metric_client,
        group_client_factory=lambda credentials: mock_group_client,
    )


def sent_time_series(mock_metric_client) -> list:
    """Return the time series passed to the last create_time_series call."""
    assert mock_metric_client.create_time_series.await_count >= 1
    call = mock_metric_client.create_time_series.await_args
    assert call.kwargs["name"] == f"projects/{PROJECT_ID}"
    return call.kwargs["time_series"]
