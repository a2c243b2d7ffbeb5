import pytest
from sqlalchemy.exc import OperationalError

from app.core import database
from app.core.logging import build_logging_config


class FlakyEngine:
    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    def connect(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        return FakeConnection()


class FakeConnection:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, statement):
        return None


def test_wait_for_database_backs_off_then_connects(monkeypatch):
    flaky = FlakyEngine(failures=2)
    delays = []
    monkeypatch.setattr(database, "engine", flaky)

    database.wait_for_database(retries=5, base_delay=0.5, sleep=delays.append)

    assert flaky.calls == 3
    assert delays == [0.5, 1.0]


def test_wait_for_database_reraises_after_last_attempt(monkeypatch):
    flaky = FlakyEngine(failures=10)
    delays = []
    monkeypatch.setattr(database, "engine", flaky)

    with pytest.raises(OperationalError):
        database.wait_for_database(retries=3, base_delay=0.1, sleep=delays.append)

    assert flaky.calls == 3
    assert delays == [0.1, 0.2]


def test_logging_config_writes_under_log_dir(tmp_path):
    config = build_logging_config(str(tmp_path), "DEBUG")

    assert config["handlers"]["file"]["filename"] == f"{tmp_path}/app.log"
    assert config["handlers"]["error_file"]["level"] == "ERROR"
    assert config["loggers"]["app"]["level"] == "DEBUG"
