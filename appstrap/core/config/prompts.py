"""
Interactive answer sources for configuration resolution.

The resolver only ever talks to a ``Prompter``; it never renders a
question itself. Three implementations:

    ClickPrompter     — real terminal questions via click
    DefaultsPrompter  — non-interactive, every question takes its default
    ScriptedPrompter  — canned answers keyed by option name (tests, automation)
"""

from __future__ import annotations

from typing import Any, Protocol

import click


class Prompter(Protocol):
    """Source of answers for configuration keys that are still unset."""

    def choose(self, key: str, question: str, choices: list[str], default: str) -> str: ...

    def ask(self, key: str, question: str, default: str = "", hidden: bool = False) -> str: ...

    def confirm(self, key: str, question: str, default: bool = True) -> bool: ...


class ClickPrompter:
    """Ask on the terminal."""

    def choose(self, key: str, question: str, choices: list[str], default: str) -> str:
        return click.prompt(
            question,
            type=click.Choice(choices, case_sensitive=False),
            default=default,
            show_choices=True,
        )

    def ask(self, key: str, question: str, default: str = "", hidden: bool = False) -> str:
        return click.prompt(
            question,
            default=default,
            hide_input=hidden,
            show_default=not hidden,
        )

    def confirm(self, key: str, question: str, default: bool = True) -> bool:
        return click.confirm(question, default=default)


class DefaultsPrompter:
    """Never blocks: answers every question with its default."""

    def choose(self, key: str, question: str, choices: list[str], default: str) -> str:
        return default

    def ask(self, key: str, question: str, default: str = "", hidden: bool = False) -> str:
        return default

    def confirm(self, key: str, question: str, default: bool = True) -> bool:
        return default


class ScriptedPrompter:
    """Answer from a mapping of option name → value, else the default.

    Records which keys were asked so callers can assert that no
    question was issued for keys already supplied by a document.
    """

    def __init__(self, answers: dict[str, Any] | None = None):
        self.answers = dict(answers or {})
        self.asked: list[str] = []

    def choose(self, key: str, question: str, choices: list[str], default: str) -> str:
        self.asked.append(key)
        return self.answers.get(key, default)

    def ask(self, key: str, question: str, default: str = "", hidden: bool = False) -> str:
        self.asked.append(key)
        return self.answers.get(key, default)

    def confirm(self, key: str, question: str, default: bool = True) -> bool:
        self.asked.append(key)
        return self.answers.get(key, default)
