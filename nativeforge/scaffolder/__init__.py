"""nativeforge scaffolder -- creates the on-disk skeleton of a native project.

Quick usage::

    from nativeforge.scaffolder import BuildConfigRenderer, ProjectScaffolder

    created = await ProjectScaffolder().scaffold(spec)
    cmake_path = await BuildConfigRenderer().write(spec)
"""

from nativeforge.scaffolder.build_config import BuildConfigRenderer
from nativeforge.scaffolder.generator import ProjectScaffolder
from nativeforge.scaffolder.templates import TemplateRenderer

__all__ = [
    "BuildConfigRenderer",
    "ProjectScaffolder",
    "TemplateRenderer",
]
