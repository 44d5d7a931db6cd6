"""Shared fixtures: a throwaway database per test and fixed clock values"""
from datetime import datetime, timezone

import pytest

from storage import KeyValueStore


@pytest.fixture
def storage(tmp_path) -> KeyValueStore:
  return KeyValueStore(str(tmp_path / "walky.db"))


@pytest.fixture
def start_time() -> datetime:
  return datetime(2026, 1, 31, 10, 0, 0, tzinfo=timezone.utc)
