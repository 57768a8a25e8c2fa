"""The welcome program: ask for a name until the accepted one is given.

Demonstrates:
- Sequencing console primitives with ``>>`` and ``and_then``
- Branching with ``if_else`` without running either branch
- Turning a rejection into a failure and retrying the whole conversation

Example:
    >>> from effectcase.examples import welcome
    >>> from effectcase.foundation.testing import ScriptedConsole
    >>>
    >>> console = ScriptedConsole(["Bob", "Joe"])
    >>> welcome(console, attempts=2).run()
    >>> console.output
    ['Hi, what is your name?', 'No soup for you!!!', 'Hi, what is your name?', 'Welcome Joe!']
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from effectcase.core import Program, fail, if_else
from effectcase.foundation.config import get_settings
from effectcase.io import get_line, put_line

if TYPE_CHECKING:
    from effectcase.foundation.config import WelcomeSettings
    from effectcase.io import Console


def _texts(accepted: str | None, settings: WelcomeSettings | None) -> tuple[WelcomeSettings, str]:
    s = settings or get_settings().welcome
    return s, accepted or s.accepted_name


def ask_name(console: Console | None = None, *, prompt: str | None = None) -> Program[str]:
    """Print the prompt, then read the answer."""
    text = prompt if prompt is not None else get_settings().welcome.prompt
    return put_line(text, console) >> get_line(console)


def welcome(
    console: Console | None = None,
    *,
    accepted: str | None = None,
    attempts: int | None = None,
    settings: WelcomeSettings | None = None,
) -> Program[None]:
    """Greet the accepted name; reject anyone else out loud and ask again.

    A rejection prints the rejection line and fails with an empty message, so
    the surrounding retry starts the conversation over. Once ``attempts`` are
    used up the program fails with RETRY_EXHAUSTED.
    """
    s, name_ok = _texts(accepted, settings)
    return (
        ask_name(console, prompt=s.prompt)
        .and_then(lambda name: if_else(
            name == name_ok,
            put_line(s.greeting.format(name=name_ok), console),
            put_line(s.rejection, console) >> fail(),
        ))
        .with_context("welcome", accepted=name_ok)
        .retry(s.attempts if attempts is None else attempts)
    )


def welcome_with_reason(
    console: Console | None = None,
    *,
    accepted: str | None = None,
    attempts: int = 3,
    settings: WelcomeSettings | None = None,
) -> Program[None]:
    """Variant that prints nothing on rejection: the failure carries the rejection text.

    When the budget runs out, the terminal failure's message is the rejection text.
    """
    s, name_ok = _texts(accepted, settings)
    return (
        ask_name(console, prompt=s.prompt)
        .and_then(lambda name: if_else(
            name == name_ok,
            put_line(s.greeting.format(name=name_ok), console),
            fail(s.rejection),
        ))
        .retry(attempts)
    )
