"""Shared fixtures."""

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest

from spendwise.store.queries import SqliteKeyValueStore
from spendwise.store.schema import init_database


class MemoryKeyValueStore:
    """Dict-backed persistence that can be told to fail."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.fail_saves = False
        self.saves = 0

    def load(self, key: str) -> str | None:
        return self.data.get(key)

    def save(self, key: str, blob: str) -> bool:
        if self.fail_saves:
            return False
        self.data[key] = blob
        self.saves += 1
        return True


class FixedClock:
    """Callable clock that advances one second per call."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now.replace(second=(self.now.second + 1) % 60)
        return current


@pytest.fixture
def memory_kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 15, 12, 0, 0))


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "spendwise.db"
    init_database(path)
    return path


@pytest.fixture
def sqlite_kv(db_path: Path) -> SqliteKeyValueStore:
    return SqliteKeyValueStore(db_path)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "config.toml"


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tests away from the real config and data directories."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    yield


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the cheapest bcrypt cost so account tests stay quick."""
    monkeypatch.setattr("spendwise.auth.BCRYPT_ROUNDS", 4)
