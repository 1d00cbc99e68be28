import pytest

from logger import Logger


@pytest.fixture(autouse=True)
def _quiet_logger(monkeypatch):
    # USERS_LOG_LEVEL из окружения не должен влиять на тесты
    monkeypatch.setattr(Logger, "level", "warn")
