"""Shared utility functions for nativeforge.

Provides async command execution, project-name sanitisation, CPU detection,
staged file writes, and Rich-based console reporting.  Every public function
is designed to be side-effect-free where possible, with clear error messages
when something goes wrong.
"""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
) -> tuple[int, str, str]:
    """Run an external command asynchronously.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple with both streams decoded
        and stripped.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------

_DISALLOWED_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")
PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def sanitize_name(raw: str) -> str:
    """Convert arbitrary user input to a filesystem-safe project name.

    * Replaces every space with an underscore.
    * Drops every character outside ``[A-Za-z0-9_-]``.

    Never raises.  An empty result must be rejected by the caller.

    Examples::

        sanitize_name("my project!") -> "my_project"
        sanitize_name("***") -> ""
    """
    return _DISALLOWED_NAME_CHARS.sub("", raw.replace(" ", "_"))


# ---------------------------------------------------------------------------
# Host inspection
# ---------------------------------------------------------------------------


def detect_cpu_count() -> int:
    """Return the number of logical CPUs usable by this process (at least 1)."""
    process_cpu_count = getattr(os, "process_cpu_count", None)
    if process_cpu_count is not None:
        count = process_cpu_count()
    elif hasattr(os, "sched_getaffinity"):
        count = len(os.sched_getaffinity(0))
    else:
        count = os.cpu_count()
    return max(count or 1, 1)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def write_staged(
    scratch_dir: str | Path | None,
    destination: str | Path,
    content: str,
    *,
    mode: int | None = None,
) -> Path:
    """Write *content* to *destination* via a file in *scratch_dir*.

    The file is fully written (and chmod-ed when *mode* is given) inside the
    scratch directory, then moved into place with ``os.replace``.  Without a
    scratch directory the destination is written directly.

    Returns:
        The destination ``Path``.
    """
    dest = Path(destination)
    if scratch_dir is None:
        dest.write_text(content, encoding="utf-8")
        if mode is not None:
            dest.chmod(mode)
        return dest

    staged = Path(scratch_dir) / dest.name
    staged.write_text(content, encoding="utf-8")
    if mode is not None:
        staged.chmod(mode)
    os.replace(staged, dest)
    return dest


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


def tail_lines(text: str, limit: int = 40) -> str:
    """Return at most the last *limit* lines of *text*."""
    lines = text.splitlines()
    if len(lines) <= limit:
        return text
    return "\n".join(["...", *lines[-limit:]])


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STAGE_NAMES: dict[int, str] = {
    1: "TOOLCHAIN",
    2: "SCAFFOLD",
    3: "CONFIGURE",
    4: "VERSION CONTROL",
    5: "BUILD",
}

STAGE_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_green",
    3: "bright_yellow",
    4: "bright_magenta",
    5: "bright_blue",
}


def print_phase_header(stage: int, name: str) -> None:
    """Print a full-width rule announcing a pipeline stage."""
    color = STAGE_COLORS.get(stage, "white")
    console.print()
    console.print(
        Rule(
            f"[bold {color}] Step {stage}: {name.upper()} [/bold {color}]",
            style=color,
        )
    )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
