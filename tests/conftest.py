"""Shared pytest fixtures for cashdesk tests."""

import os
import tempfile

import pytest
from click.testing import CliRunner

from cashdesk.database.factories import create_sqlite_database
from cashdesk.domain.channel import ChannelService
from cashdesk.domain.session import SessionService

USER = "operator"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    """Operator used by service-level tests."""
    return USER


@pytest.fixture
def channel_service(temp_db):
    """Create a ChannelService with a temporary database."""
    return ChannelService(temp_db)


@pytest.fixture
def session_service(temp_db, channel_service):
    """Create a SessionService sharing the channel service."""
    return SessionService(temp_db, channel_service)


@pytest.fixture
def seeded_channels(channel_service, user_id):
    """Seed the default channels and return them keyed by ID."""
    channel_service.seed_default_channels(user_id)
    return {channel.id: channel for channel in channel_service.list_channels(user_id)}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()
