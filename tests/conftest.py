"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio

from drive_storage import DriveSettings, DriveStorage
from drive_storage.drive import DriveClientConfig
from fake_drive import FakeDrive


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "network: talks to the in-process fake Drive server"
    )


def make_settings(token_uri: str = "http://127.0.0.1:9/token", **overrides) -> DriveSettings:
    """Enabled settings matching the documented example configuration."""
    values = dict(
        enabled=True,
        client_id="c1",
        client_secret="s1",
        redirect_uri="https://x/cb",
        refresh_token="r1",
        token_uri=token_uri,
    )
    values.update(overrides)
    return DriveSettings(**values)


@pytest_asyncio.fixture
async def fake_drive():
    drive = FakeDrive()
    await drive.start()
    yield drive
    await drive.close()


@pytest.fixture
def client_config(fake_drive) -> DriveClientConfig:
    # Small chunks so transfers span several reads/writes
    return DriveClientConfig(
        api_base=fake_drive.api_base,
        upload_base=fake_drive.upload_base,
        timeout=(5, 5),
        chunk_size=1024,
    )


@pytest.fixture
def storage(fake_drive, client_config) -> DriveStorage:
    """Initialized DriveStorage pointed at the fake server."""
    storage = DriveStorage(make_settings(fake_drive.token_uri), client_config)
    assert storage.initialize() is True
    return storage
