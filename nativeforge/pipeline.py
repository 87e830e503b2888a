"""nativeforge pipeline orchestrator.

Implements the project creation pipeline:

Step 1: TOOLCHAIN       -- Check cmake, git and the language's compiler/assembler.
Step 2: SCAFFOLD        -- Create src/, include/, out/ and src/main.<ext>.
Step 3: CONFIGURE       -- Render CMakeLists.txt.
Step 4: VERSION CONTROL -- git init and .gitignore.
Step 5: BUILD           -- Write build.sh and run it once.

Every step runs once; the first failure aborts the run and nothing already
written is rolled back.

Usage::

    nativeforge --name demo --lang cpp --yes
    python -m nativeforge -n "my project" -l c -o ~/code
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import tempfile
import time
from pathlib import Path
from typing import Any, Sequence

from rich.markup import escape
from rich.panel import Panel

from nativeforge import __version__
from nativeforge.builder import BuildInvoker, RepoInitializer
from nativeforge.config import BUILD_TYPES, ForgeConfig, Language, ProjectSpec
from nativeforge.errors import AbortRequested, ForgeError, UsageError
from nativeforge.resolver import OptionResolver
from nativeforge.scaffolder import BuildConfigRenderer, ProjectScaffolder, TemplateRenderer
from nativeforge.toolchain import ToolchainValidator
from nativeforge.utils import (
    STAGE_NAMES,
    console,
    err_console,
    format_duration,
    print_error,
    print_phase_header,
    print_success,
    print_warning,
)

SCRATCH_PREFIX = ".nativeforge-"


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives the creation of one project from a resolved :class:`ProjectSpec`.

    Attributes:
        config: Tool-level settings (build type, parallelism, output dir).
        validator: Toolchain checker run before anything is written.
        renderer: Shared template renderer for every generated file.
    """

    def __init__(
        self,
        config: ForgeConfig,
        validator: ToolchainValidator | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.validator = validator or ToolchainValidator()
        self.renderer = renderer or TemplateRenderer()

    async def run(self, spec: ProjectSpec) -> dict[str, Any]:
        """Execute every step for *spec*.

        All files are staged through a scratch directory next to the project
        root, which is removed on every exit path.

        Returns:
            Summary with the project path, created paths, whether git was
            initialized, the binary path (``None`` when the build is skipped)
            and the elapsed time.

        Raises:
            ForgeError: From the first step that fails.
        """
        start = time.monotonic()
        result: dict[str, Any] = {
            "project_path": spec.root,
            "created": [],
            "git_initialized": False,
            "binary": None,
        }

        self._check_toolchain(spec)

        with tempfile.TemporaryDirectory(
            prefix=SCRATCH_PREFIX, dir=spec.root.parent, ignore_cleanup_errors=True
        ) as scratch:
            print_phase_header(2, STAGE_NAMES[2])
            scaffolder = ProjectScaffolder(self.renderer, scratch)
            result["created"].extend(await scaffolder.scaffold(spec))
            console.print(f"  [green]+[/green] Created {escape(str(spec.root))}")

            print_phase_header(3, STAGE_NAMES[3])
            build_config = BuildConfigRenderer(self.renderer, scratch)
            result["created"].append(await build_config.write(spec))
            console.print("  [green]+[/green] Wrote CMakeLists.txt")

            print_phase_header(4, STAGE_NAMES[4])
            repo = RepoInitializer(self.renderer, scratch)
            result["git_initialized"] = await repo.init_repo(spec.root)
            result["created"].append(spec.root / ".gitignore")

            print_phase_header(5, STAGE_NAMES[5])
            builder = BuildInvoker(self.config, self.renderer, scratch)
            if self.config.run_build:
                result["binary"] = await builder.invoke_build(spec)
            else:
                await builder.write_script(spec)
                print_warning("  Skipping the initial build (--no-build).")
            result["created"].append(spec.root / "build.sh")

        result["duration"] = time.monotonic() - start
        return result

    def _check_toolchain(self, spec: ProjectSpec) -> None:
        print_phase_header(1, STAGE_NAMES[1])
        resolved = self.validator.validate(spec.language)
        for tool, path in resolved.items():
            console.print(f"  [green]+[/green] {tool}: [dim]{escape(path)}[/dim]")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nativeforge",
        description="Create a new C, C++ or assembly project with CMake and git.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  nativeforge -n demo -l cpp -y\n"
            '  nativeforge --name "my project" --lang c --output ~/code\n'
            "  nativeforge                      (asks for name and language)\n"
        ),
    )
    parser.add_argument("-n", "--name", help="Project name (spaces become underscores)")
    parser.add_argument(
        "-l",
        "--lang",
        metavar="{" + ",".join(Language.choices()) + "}",
        help="Project language",
    )
    parser.add_argument(
        "-y", "--yes", action="store_true", help="Skip the confirmation prompt"
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Directory the project is created in (default: current directory)",
    )
    parser.add_argument(
        "-b",
        "--build-type",
        metavar="{" + ",".join(BUILD_TYPES) + "}",
        default=None,
        help="Default CMAKE_BUILD_TYPE written to build.sh (default: Release)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Parallel build jobs (default: number of logical CPUs)",
    )
    parser.add_argument(
        "--no-build",
        action="store_true",
        help="Generate build.sh without running the initial build",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _load_config(parser: argparse.ArgumentParser, args: argparse.Namespace) -> ForgeConfig:
    try:
        return ForgeConfig.from_env().merged(
            output_dir=args.output,
            build_type=args.build_type,
            jobs=args.jobs,
            run_build=False if args.no_build else None,
        )
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError
        parser.error(str(exc))


def _print_result(spec: ProjectSpec, result: dict[str, Any]) -> None:
    lines = [
        "[green]Project created[/green]",
        f"  Path:     {escape(str(spec.root))}",
        f"  Language: {spec.language.value}",
    ]
    if result.get("binary"):
        lines.append(f"  Binary:   {escape(str(result['binary']))}")
    lines.extend(
        [
            "",
            "Next steps:",
            f"  cd {spec.name}",
            "  ./build.sh && cmake --build out --target run",
        ]
    )
    console.print(Panel("\n".join(lines), title=spec.name, border_style="green"))
    print_success(f"Done in {format_duration(result.get('duration', 0.0))}.")


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``nativeforge`` and ``python -m nativeforge``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _load_config(parser, args)

    try:
        spec = OptionResolver(config).resolve(args.name, args.lang, args.yes)
        result = asyncio.run(Pipeline(config).run(spec))
    except AbortRequested as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        return exc.exit_code
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print_error(str(exc))
        return exc.exit_code
    except ForgeError as exc:
        print_error(str(exc))
        return exc.exit_code
    except KeyboardInterrupt:
        err_console.print()
        print_error("Interrupted.")
        return 130

    _print_result(spec, result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
