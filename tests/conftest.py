"""Shared fixtures."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_cursor():
    return MagicMock()


@pytest.fixture
def mock_connection(mock_cursor):
    """Stands in for PostgresConnection; every get_cursor() yields mock_cursor."""
    connection = MagicMock()
    connection.get_cursor.return_value.__enter__.return_value = mock_cursor
    return connection
