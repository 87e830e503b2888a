"""Turns command-line flags and interactive answers into a ``ProjectSpec``.

Flags win over prompts.  Name and language have no defaults: when a flag is
missing the user is asked, and a bad flag value is fatal while a bad answer
is reported and asked again.  Nothing here touches the filesystem beyond
read-only checks.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Callable

from rich.markup import escape
from rich.prompt import Prompt

from nativeforge.config import ForgeConfig, Language, ProjectSpec
from nativeforge.errors import AbortRequested, InputValidationError, UsageError
from nativeforge.utils import console, print_summary_table, print_warning, sanitize_name

EXIT_WORDS = frozenset({"exit", "quit"})


class LanguagePromptState(str, Enum):
    PROMPTING = "prompting"
    VALIDATED = "validated"
    EXITED = "exited"


def step_language_prompt(answer: str) -> tuple[LanguagePromptState, Language | None]:
    """Advance the language prompt by one answer.

    ``exit``/``quit`` ends the prompt, a supported language validates it and
    anything else keeps prompting.
    """
    cleaned = answer.strip().lower()
    if cleaned in EXIT_WORDS:
        return LanguagePromptState.EXITED, None
    language = Language.parse(cleaned)
    if language is None:
        return LanguagePromptState.PROMPTING, None
    return LanguagePromptState.VALIDATED, language


def _rich_ask(label: str, default: str | None = None) -> str:
    prompt = f"[bold cyan]{escape(label)}[/bold cyan]"
    if default is None:
        return Prompt.ask(prompt, console=console)
    return Prompt.ask(prompt, console=console, default=default, show_default=False)


class OptionResolver:
    """Builds the immutable :class:`ProjectSpec` for one run.

    Args:
        config: Tool settings; only ``output_dir`` is consulted.
        ask: Prompt function ``(label, default) -> answer``.  Defaults to a
            Rich prompt on the terminal.
        interactive: Whether prompting is allowed.  Defaults to whether stdin
            is a terminal.
    """

    def __init__(
        self,
        config: ForgeConfig | None = None,
        ask: Callable[[str, str | None], str] | None = None,
        interactive: bool | None = None,
    ) -> None:
        self.config = config or ForgeConfig()
        self._ask = ask or _rich_ask
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    # -- Public API --------------------------------------------------------

    def resolve(
        self,
        name: str | None = None,
        language: str | None = None,
        auto_confirm: bool = False,
    ) -> ProjectSpec:
        """Merge flags and prompts into a validated spec.

        Raises:
            UsageError: A value is missing and prompting is not possible.
            InputValidationError: A flag value or the output directory is invalid.
            AbortRequested: The user typed ``exit``/``quit`` or declined.
        """
        output_dir = self.output_dir()

        # Flag values are checked before any prompt is shown.
        flag_language = self._parse_language(language) if language is not None else None
        project_name = self._resolve_name(name, output_dir)
        project_language = flag_language or self._prompt_language()

        spec = ProjectSpec(
            name=project_name,
            language=project_language,
            auto_confirm=auto_confirm,
            root=output_dir / project_name,
        )

        if not auto_confirm:
            self._confirm(spec)
        return spec

    def output_dir(self) -> Path:
        """The absolute directory new projects are created in.

        Raises:
            InputValidationError: If it is missing or not writable.
        """
        output_dir = self.config.output_dir.expanduser().resolve()
        if not output_dir.is_dir():
            raise InputValidationError(f"Output directory does not exist: {output_dir}")
        if not os.access(output_dir, os.W_OK | os.X_OK):
            raise InputValidationError(f"Output directory is not writable: {output_dir}")
        return output_dir

    @staticmethod
    def name_problem(name: str, output_dir: Path) -> str | None:
        """Return why *name* cannot be used, or ``None`` if it can."""
        if not name:
            return "Project name is empty after removing unsupported characters."
        if os.path.lexists(output_dir / name):
            return f"'{name}' already exists in {output_dir}."
        return None

    # -- Name --------------------------------------------------------------

    def _resolve_name(self, raw: str | None, output_dir: Path) -> str:
        if raw is not None:
            name = sanitize_name(raw)
            problem = self.name_problem(name, output_dir)
            if problem:
                raise InputValidationError(problem)
            return name

        self._require_interactive("--name")
        while True:
            answer = self._prompt("Project name")
            name = sanitize_name(answer)
            problem = self.name_problem(name, output_dir)
            if problem:
                print_warning(f"{problem} Please choose another name.")
                continue
            if name != answer.strip():
                console.print(f"  Using sanitized name [bold]{name}[/bold]")
            return name

    # -- Language ----------------------------------------------------------

    @staticmethod
    def _parse_language(raw: str) -> Language:
        language = Language.parse(raw)
        if language is None:
            valid = ", ".join(Language.choices())
            raise InputValidationError(
                f"Unsupported language '{raw}'. Choose one of: {valid}."
            )
        return language

    def _prompt_language(self) -> Language:
        valid = ", ".join(Language.choices())
        self._require_interactive("--lang")
        while True:
            answer = self._prompt(f"Language ({valid}, or 'exit')")
            state, language = step_language_prompt(answer)
            if state is LanguagePromptState.EXITED:
                raise AbortRequested("Exiting without creating a project.")
            if state is LanguagePromptState.VALIDATED and language is not None:
                return language
            print_warning(f"'{answer.strip()}' is not supported. Choose one of: {valid}.")

    # -- Confirmation ------------------------------------------------------

    def _confirm(self, spec: ProjectSpec) -> None:
        self._require_interactive("--yes")
        print_summary_table(
            {
                "Name": spec.name,
                "Language": spec.language.value,
                "Directory": str(spec.root),
            },
            title="New project",
        )
        answer = self._prompt("Create this project? [Y/n]", default="y")
        if answer.strip().lower().startswith("n"):
            raise AbortRequested("Aborted; nothing was created.")

    # -- Helpers -----------------------------------------------------------

    def _require_interactive(self, flag: str) -> None:
        if not self.interactive:
            raise UsageError(f"{flag} is required when stdin is not a terminal")

    def _prompt(self, label: str, default: str | None = None) -> str:
        try:
            return self._ask(label, default)
        except EOFError as exc:
            raise InputValidationError("Input ended before a value was given.") from exc
