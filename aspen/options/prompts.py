"""Interactive choosers built on ``rich.prompt``.

``interactive_chooser`` answers a ``PromptStage`` by printing a numbered list
and reading the user's pick; ``defaults_chooser`` answers without asking,
which is what ``--yes`` uses for non-interactive runs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rich.prompt import Confirm, Prompt

from aspen.options.resolver import Choice, PromptStage
from aspen.utils import check_project_name, console


def interactive_chooser(
    stage: PromptStage, choices: list[Choice], selection: Mapping[str, Any]
) -> str | list[str]:
    """Ask the user to pick from *choices*."""
    console.print(f"\n[bold]{stage.message}:[/bold]")
    for index, choice in enumerate(choices, start=1):
        mark = "[green]*[/green]" if stage.multiple and choice.selected else " "
        detail = f" [dim]- {choice.description}[/dim]" if choice.description else ""
        console.print(f"  {mark} {index}. [cyan]{choice.label}[/cyan]{detail}")

    if stage.multiple:
        default = ",".join(
            str(i) for i, c in enumerate(choices, start=1) if c.selected
        )
        while True:
            raw = Prompt.ask(
                "Numbers separated by commas ('none' for nothing)",
                default=default or "none",
                console=console,
            )
            picked = _parse_multi(raw, choices)
            if picked is not None:
                return picked
            console.print("[red]Please enter valid numbers from the list.[/red]")

    default_index = next(
        (i for i, c in enumerate(choices, start=1) if c.selected), 1
    )
    raw = Prompt.ask(
        "Choice",
        choices=[str(i) for i in range(1, len(choices) + 1)],
        default=str(default_index),
        console=console,
    )
    return choices[int(raw) - 1].value


def defaults_chooser(
    stage: PromptStage, choices: list[Choice], selection: Mapping[str, Any]
) -> str | list[str]:
    """Pick the default-selected choices without prompting."""
    if stage.multiple:
        return [c.value for c in choices if c.selected]
    for choice in choices:
        if choice.selected:
            return choice.value
    return choices[0].value


def ask_project_name() -> str:
    """Prompt until a valid project name is entered."""
    while True:
        name = Prompt.ask("What is the name of your project?", console=console).strip()
        problem = check_project_name(name)
        if problem is None:
            return name
        console.print(f"[red]{problem}[/red]")


def confirm_overwrite(path: str) -> bool:
    """Ask whether to proceed with a non-empty target directory."""
    return Confirm.ask(
        f"Directory [cyan]{path}[/cyan] is not empty. Do you want to proceed?",
        default=False,
        console=console,
    )


def _parse_multi(raw: str, choices: list[Choice]) -> list[str] | None:
    text = raw.strip().lower()
    if text in ("", "none"):
        return []
    picked: list[str] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or not 1 <= int(part) <= len(choices):
            return None
        value = choices[int(part) - 1].value
        if value not in picked:
            picked.append(value)
    return picked
