"""Shared pytest fixtures for RollCall tests."""

from datetime import date

import pytest

from rollcall.database.db import configure_engine, init_db


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def monday():
    """Monday 2024-05-06, the start of a reference week."""
    return date(2024, 5, 6)
