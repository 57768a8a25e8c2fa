"""Testing utilities: scripted console input and recorded output."""

from .console import ConsoleEvent, ScriptedConsole, scripted_console

__all__ = ["ConsoleEvent", "ScriptedConsole", "scripted_console"]
