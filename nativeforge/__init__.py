"""nativeforge -- scaffolding generator for C, C++ and assembly projects.

Creates a CMake project skeleton with a hello-world program, initializes git
and runs an initial build.

Quick usage::

    from nativeforge import ForgeConfig, OptionResolver, Pipeline

    config = ForgeConfig.from_env()
    spec = OptionResolver(config).resolve("demo", "cpp", auto_confirm=True)
    result = await Pipeline(config).run(spec)
"""

__version__ = "0.1.0"

from nativeforge.config import ForgeConfig, Language, ProjectSpec
from nativeforge.pipeline import Pipeline
from nativeforge.resolver import OptionResolver
from nativeforge.utils import sanitize_name

__all__ = [
    "ForgeConfig",
    "Language",
    "OptionResolver",
    "Pipeline",
    "ProjectSpec",
    "sanitize_name",
]

