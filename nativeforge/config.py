"""nativeforge configuration.

Typed models for the two pieces of state a run needs: the tool-level
``ForgeConfig`` (output location, build settings) and the immutable
``ProjectSpec`` built once by the option resolver.  The per-language facts
live in the static ``LANGUAGES`` table.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nativeforge.utils import PROJECT_NAME_PATTERN

BUILD_TYPES = ("Debug", "Release", "RelWithDebInfo", "MinSizeRel")


class Language(str, Enum):
    """Languages a project can be scaffolded for."""

    C = "c"
    CPP = "cpp"
    ASM = "asm"

    @classmethod
    def parse(cls, value: str) -> "Language | None":
        """Case-insensitive lookup; returns ``None`` for unknown values."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @classmethod
    def choices(cls) -> list[str]:
        return [member.value for member in cls]


class LanguageProfile(BaseModel):
    """Static facts about one supported language."""

    model_config = ConfigDict(frozen=True)

    cmake_languages: str = Field(..., description="Value of the project() LANGUAGES field")
    extension: str = Field(..., description="Source file extension, without the dot")
    required_tool: str | None = Field(
        default=None, description="Executable that must be on PATH for this language"
    )
    standard_version: str | None = Field(default=None)
    standard_block: str = Field(default="", description="CMake lines pinning the standard")
    linker_language: str | None = Field(
        default=None, description="LINKER_LANGUAGE for the target when CMake cannot infer it"
    )
    sample_source: str = Field(..., description="Template file holding main.<ext>")


LANGUAGES: dict[Language, LanguageProfile] = {
    Language.C: LanguageProfile(
        cmake_languages="C",
        extension="c",
        standard_version="C11",
        standard_block="set(CMAKE_C_STANDARD 11)\nset(CMAKE_C_STANDARD_REQUIRED ON)",
        sample_source="main.c",
    ),
    Language.CPP: LanguageProfile(
        cmake_languages="CXX",
        extension="cpp",
        required_tool="g++",
        standard_version="C++17",
        standard_block="set(CMAKE_CXX_STANDARD 17)\nset(CMAKE_CXX_STANDARD_REQUIRED ON)",
        sample_source="main.cpp",
    ),
    Language.ASM: LanguageProfile(
        cmake_languages="C ASM_NASM",
        extension="asm",
        required_tool="nasm",
        # ASM_NASM has no link rule of its own; link with the C driver and libc.
        linker_language="C",
        sample_source="main.asm",
    ),
}


class ProjectSpec(BaseModel):
    """The resolved, validated choices that drive one run.

    Built once by :class:`~nativeforge.resolver.OptionResolver` and passed to
    every pipeline stage.  Instances are frozen.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Sanitized project name")
    language: Language
    auto_confirm: bool = Field(default=False)
    root: Path = Field(..., description="Absolute path of the project directory")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not PROJECT_NAME_PATTERN.match(value):
            raise ValueError(
                f"project name {value!r} must be non-empty and only contain "
                "letters, digits, '_' and '-'"
            )
        return value

    @field_validator("root")
    @classmethod
    def _check_root(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError("project root must be an absolute path")
        return value

    @property
    def profile(self) -> LanguageProfile:
        return LANGUAGES[self.language]

    @property
    def standard_version(self) -> str | None:
        return self.profile.standard_version

    @property
    def source_path(self) -> Path:
        """Path of the generated ``src/main.<ext>``."""
        return self.root / "src" / f"main.{self.profile.extension}"

    @property
    def binary_path(self) -> Path:
        """Where the initial build places the executable."""
        return self.root / "out" / "bin" / self.name


class ForgeConfig(BaseModel):
    """Tool-level settings shared by every stage of a run."""

    output_dir: Path = Field(default=Path("."), description="Parent of new projects")
    build_type: str = Field(default="Release", description="CMAKE_BUILD_TYPE default")
    jobs: int | None = Field(
        default=None, ge=1, description="Build parallelism; None means one per CPU"
    )
    run_build: bool = Field(default=True, description="Run the build wrapper once")
    build_timeout: int = Field(default=600, ge=10, description="Build timeout in seconds")

    @field_validator("build_type")
    @classmethod
    def _check_build_type(cls, value: str) -> str:
        for candidate in BUILD_TYPES:
            if candidate.lower() == value.lower():
                return candidate
        raise ValueError(f"build type must be one of {', '.join(BUILD_TYPES)}")

    @classmethod
    def from_env(cls) -> "ForgeConfig":
        """Build a ``ForgeConfig`` from environment variables.

        Recognised variables (all optional):
            NATIVEFORGE_OUTPUT_DIR, NATIVEFORGE_BUILD_TYPE, NATIVEFORGE_JOBS,
            NATIVEFORGE_SKIP_BUILD, NATIVEFORGE_BUILD_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NATIVEFORGE_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["NATIVEFORGE_OUTPUT_DIR"])
        if os.environ.get("NATIVEFORGE_BUILD_TYPE"):
            kwargs["build_type"] = os.environ["NATIVEFORGE_BUILD_TYPE"]
        if os.environ.get("NATIVEFORGE_JOBS"):
            kwargs["jobs"] = int(os.environ["NATIVEFORGE_JOBS"])
        if os.environ.get("NATIVEFORGE_BUILD_TIMEOUT"):
            kwargs["build_timeout"] = int(os.environ["NATIVEFORGE_BUILD_TIMEOUT"])
        if os.environ.get("NATIVEFORGE_SKIP_BUILD", "").lower() in ("1", "true", "yes"):
            kwargs["run_build"] = False
        return cls(**kwargs)

    def merged(self, **overrides: Any) -> "ForgeConfig":
        """Return a copy with every non-``None`` override applied and re-validated."""
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return type(self).model_validate(data)
