"""Interactive prompts for the CLI.

Numbered single and multiple selection, confirmations and free text input,
all read through the Rich console.  Tests drive a :class:`Prompter` with an
in-memory ``stream``.
"""

from __future__ import annotations

from typing import Callable, Sequence, TextIO

from rich.console import Console

from treeforge.utils import console as default_console


class PromptAborted(Exception):
    """Raised when input ends before a valid answer was given."""


class Prompter:
    """Asks the user for answers on the console."""

    def __init__(self, console: Console | None = None, stream: TextIO | None = None) -> None:
        self.console = console or default_console
        self.stream = stream

    def _ask(self, prompt: str) -> str:
        if self.stream is not None:
            self.console.print(prompt, end="", markup=False)
            line = self.stream.readline()
            if not line:
                raise PromptAborted(prompt)
            return line.strip()
        try:
            return self.console.input(prompt, markup=False).strip()
        except EOFError as exc:
            raise PromptAborted(prompt) from exc

    def select(self, message: str, choices: Sequence[str], default: str | None = None) -> str:
        """Pick one of *choices* by number or by name."""
        if not choices:
            raise ValueError(f"No choices available for: {message}")

        self.console.print(f"\n[cyan]{message}[/cyan]")
        for i, choice in enumerate(choices, 1):
            marker = " (default)" if choice == default else ""
            self.console.print(f"  {i}. {choice}{marker}")

        while True:
            answer = self._ask(f"Select (1-{len(choices)}): ")
            if not answer and default is not None:
                return default
            if answer in choices:
                return answer
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1]
            self.console.print(f"[yellow]Please enter a number between 1 and {len(choices)}[/yellow]")

    def multiselect(self, message: str, choices: Sequence[str]) -> list[str]:
        """Pick any number of *choices* as a comma-separated list.

        An empty answer selects nothing.  Selections keep the order of
        *choices*.
        """
        if not choices:
            return []

        self.console.print(f"\n[cyan]{message}[/cyan]")
        for i, choice in enumerate(choices, 1):
            self.console.print(f"  {i}. {choice}")

        while True:
            answer = self._ask("Select (comma-separated numbers, empty for none): ")
            if not answer:
                return []
            picked: set[str] = set()
            invalid: list[str] = []
            for item in (part.strip() for part in answer.split(",")):
                if not item:
                    continue
                if item in choices:
                    picked.add(item)
                elif item.isdigit() and 1 <= int(item) <= len(choices):
                    picked.add(choices[int(item) - 1])
                else:
                    invalid.append(item)
            if not invalid:
                return [choice for choice in choices if choice in picked]
            self.console.print(f"[yellow]Unknown choice(s): {', '.join(invalid)}[/yellow]")

    def confirm(self, message: str, default: bool = False) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = self._ask(f"{message} [{hint}] ").lower()
            if not answer:
                return default
            if answer in {"y", "yes"}:
                return True
            if answer in {"n", "no"}:
                return False
            self.console.print("[yellow]Please answer y or n[/yellow]")

    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Callable[[str], str | None] | None = None,
    ) -> str:
        """Ask for free text.

        *validate* returns an error message for invalid input, ``None``
        otherwise.
        """
        suffix = f" [{default}]" if default else ""
        while True:
            answer = self._ask(f"{message}{suffix} ") or (default or "")
            error = validate(answer) if validate else None
            if error is None:
                return answer
            self.console.print(f"[yellow]{error}[/yellow]")
