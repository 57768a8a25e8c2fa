"""End-to-end tests of the welcome programs against a scripted console."""

from __future__ import annotations

import pytest

from effectcase.examples import ask_name, welcome, welcome_with_reason
from effectcase.foundation.config import WelcomeSettings, clear_settings_cache
from effectcase.foundation.errors import ErrorCode, InvalidCount, RetryExhausted
from effectcase.foundation.testing import ScriptedConsole, scripted_console

PROMPT = "Hi, what is your name?"
REJECT = "No soup for you!!!"


def test_rejects_then_welcomes() -> None:
    console = ScriptedConsole(["Bob", "Joe"])
    welcome(console, attempts=2).run()
    console.assert_output(PROMPT, REJECT, PROMPT, "Welcome Joe!")
    assert console.remaining == 0


def test_accepted_name_first_try() -> None:
    console = ScriptedConsole(["Joe", "unused"])
    welcome(console).run()
    console.assert_output(PROMPT, "Welcome Joe!")
    assert console.inputs_read == ["Joe"]


def test_building_welcome_touches_no_console() -> None:
    console = ScriptedConsole(["Joe"])
    welcome(console)
    console.assert_nothing_written()
    assert console.remaining == 1


def test_budget_exhausted() -> None:
    console = ScriptedConsole(["Bob", "Ann", "Joe"])
    with pytest.raises(RetryExhausted) as ei:
        welcome(console, attempts=2).run()
    assert console.output == [PROMPT, REJECT, PROMPT, REJECT]
    assert console.remaining == 1

    t = ei.value.trace
    assert t.message == ""
    ops = [c.operation for c in t.contexts]
    assert ops == ["welcome", "retry"]
    assert t.contexts[0].metadata == {"accepted": "Joe"}


def test_end_of_input_is_retried_then_reported() -> None:
    console = ScriptedConsole([])
    with pytest.raises(RetryExhausted) as ei:
        welcome(console, attempts=3).run()
    assert console.output == [PROMPT] * 3
    assert ei.value.trace.contexts[-1].metadata["last_code"] == ErrorCode.END_OF_INPUT


def test_custom_accepted_name_and_texts() -> None:
    settings = WelcomeSettings(prompt="Name?", rejection="Go away", greeting="Hello, {name}.")
    console = ScriptedConsole(["Joe", "Ann"])
    welcome(console, accepted="Ann", attempts=2, settings=settings).run()
    console.assert_output("Name?", "Go away", "Name?", "Hello, Ann.")


def test_accepted_name_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EFFECTCASE_WELCOME_ACCEPTED_NAME", "Elaine")
    clear_settings_cache()
    console = ScriptedConsole(["Elaine"])
    welcome(console).run()
    console.assert_output(PROMPT, "Welcome Elaine!")


def test_zero_attempts_rejected_at_build() -> None:
    with pytest.raises(InvalidCount):
        welcome(ScriptedConsole(), attempts=0)


def test_uses_default_console() -> None:
    with scripted_console("Joe") as console:
        welcome(attempts=1).run()
    console.assert_output(PROMPT, "Welcome Joe!")


def test_with_reason_fails_with_rejection_text() -> None:
    console = ScriptedConsole(["Bob", "Bob", "Bob"])
    with pytest.raises(RetryExhausted) as ei:
        welcome_with_reason(console).run()
    assert str(ei.value) == REJECT
    console.assert_output(PROMPT, PROMPT, PROMPT)


def test_with_reason_succeeds() -> None:
    console = ScriptedConsole(["Bob", "Joe"])
    welcome_with_reason(console).run()
    console.assert_output(PROMPT, PROMPT, "Welcome Joe!")


def test_ask_name() -> None:
    console = ScriptedConsole(["  Joe  "])
    assert ask_name(console, prompt="Who?").run() == "  Joe  "
    console.assert_output("Who?")
