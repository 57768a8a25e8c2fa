"""Shared fixtures: every test starts from default settings, console and logging."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from effectcase.foundation.config import clear_settings_cache
from effectcase.io import reset_console
from effectcase.runtime.observability import configure_logging

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for var in ("EFFECTCASE_DEBUG", "EFFECTCASE_LOG_LEVEL", "EFFECTCASE_LOG_FORMAT", "EFFECTCASE_RETRY_MAX_ATTEMPTS",
                "EFFECTCASE_RETRY_BACKOFF", "EFFECTCASE_WELCOME_ACCEPTED_NAME", "EFFECTCASE_WELCOME_ATTEMPTS"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    configure_logging("none")
    yield
    clear_settings_cache()
    reset_console()
    configure_logging("none")
