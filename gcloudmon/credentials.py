"""Credential providers for Cloud Monitoring requests.

Every provider loads credentials on each call to ``acquire``; nothing is
cached between requests. Loading may touch the filesystem or the metadata
server, so it runs in a worker thread to keep the event loop free.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

import google.auth
from google.auth import credentials as ga_credentials
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account

from gcloudmon.config import Config
from gcloudmon.errors import AuthError

MONITORING_SCOPES = (
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/monitoring",
    "https://www.googleapis.com/auth/monitoring.read",
    "https://www.googleapis.com/auth/monitoring.write",
)


class CredentialsProvider(ABC):
    """Base class for credential providers."""

    @abstractmethod
    async def acquire(self) -> ga_credentials.Credentials:
        """
        Load credentials for a single request.

        Returns:
            Credentials scoped for Cloud Monitoring when scoping is required

        Raises:
            AuthError: If credentials cannot be loaded
        """
        pass


class ApplicationDefaultCredentialsProvider(CredentialsProvider):
    """Loads application default credentials from the environment."""

    async def acquire(self) -> ga_credentials.Credentials:
        try:
            credentials, _ = await asyncio.to_thread(google.auth.default)
        except GoogleAuthError as e:
            raise AuthError(f"Failed to load application default credentials: {e}", e) from e
        return ga_credentials.with_scopes_if_required(credentials, MONITORING_SCOPES)


class ServiceAccountFileCredentialsProvider(CredentialsProvider):
    """Loads service account credentials from a JSON key file."""

    def __init__(self, key_filename: str):
        self.key_filename = key_filename

    async def acquire(self) -> ga_credentials.Credentials:
        try:
            credentials = await asyncio.to_thread(
                service_account.Credentials.from_service_account_file, self.key_filename
            )
        except (GoogleAuthError, OSError, ValueError) as e:
            raise AuthError(f"Failed to load credentials from {self.key_filename}: {e}", e) from e
        return ga_credentials.with_scopes_if_required(credentials, MONITORING_SCOPES)


class AnonymousCredentialsProvider(CredentialsProvider):
    """Provides anonymous credentials for local mode, where nothing is sent."""

    async def acquire(self) -> ga_credentials.Credentials:
        return ga_credentials.AnonymousCredentials()


def create_credentials_provider(config: Config) -> CredentialsProvider:
    """
    Create a credentials provider appropriate for the configuration.

    In local mode, returns anonymous credentials.
    With a key file configured, loads credentials from that file.
    Otherwise falls back to application default credentials.

    Args:
        config: Application configuration

    Returns:
        Credentials provider instance
    """
    if config.local_mode:
        return AnonymousCredentialsProvider()
    if config.key_filename:
        logging.info(f"Using service account key file: {config.key_filename}")
        return ServiceAccountFileCredentialsProvider(config.key_filename)
    return ApplicationDefaultCredentialsProvider()


__all__ = [
    "MONITORING_SCOPES",
    "AnonymousCredentialsProvider",
    "ApplicationDefaultCredentialsProvider",
    "CredentialsProvider",
    "ServiceAccountFileCredentialsProvider",
    "create_credentials_provider",
]
