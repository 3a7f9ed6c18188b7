"""
Prompt provider — how the wizard talks to the operator.

The wizard never reads stdin or writes stdout itself.  It is handed a
``PromptProvider`` and calls it at every suspension point, so the same
flow runs in a terminal (``ClickPrompter``) or from a script of canned
answers in tests.
"""

from __future__ import annotations

from typing import Protocol, Sequence

import click


class PromptProvider(Protocol):
    """Questions and notices, one call per interaction."""

    def confirm(self, message: str) -> bool:
        """Yes/no question; re-asks until the answer is one of y/yes/n/no."""
        ...

    def ask(self, message: str) -> str:
        """Free text; re-asks until the answer is non-empty."""
        ...

    def ask_optional(self, message: str) -> str:
        """Free text; an empty answer is returned as ``""``."""
        ...

    def choose(self, message: str, choices: Sequence[str]) -> str:
        """One of ``choices``; re-asks on anything else."""
        ...

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def boxed(self, title: str, lines: Sequence[str]) -> None: ...


class ClickPrompter:
    """Terminal ``PromptProvider`` built on click's prompt helpers."""

    def confirm(self, message: str) -> bool:
        # default=None: an empty answer is re-asked, never assumed
        return click.confirm(message, default=None)

    def ask(self, message: str) -> str:
        # click only rejects a truly empty line; blank text is re-asked here
        while True:
            answer = click.prompt(message, type=str).strip()
            if answer:
                return answer
            click.secho("Error: a value is required.", fg="red", err=True)

    def ask_optional(self, message: str) -> str:
        return click.prompt(message, default="", show_default=False, type=str).strip()

    def choose(self, message: str, choices: Sequence[str]) -> str:
        return click.prompt(message, type=click.Choice(list(choices)))

    def info(self, message: str) -> None:
        click.echo(f"   {message}")

    def success(self, message: str) -> None:
        click.secho(f"✅ {message}", fg="green", bold=True)

    def error(self, message: str) -> None:
        click.secho(f"❌ {message}", fg="red", err=True)

    def boxed(self, title: str, lines: Sequence[str]) -> None:
        body = [title, *lines]
        width = max(len(line) for line in body)
        click.echo(f"╭─{'─' * width}─╮")
        for line in body:
            click.echo(f"│ {line.ljust(width)} │")
        click.echo(f"╰─{'─' * width}─╯")
