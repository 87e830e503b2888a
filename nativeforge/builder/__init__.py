"""nativeforge builder -- version control setup and the initial build."""

from nativeforge.builder.build import BuildInvoker
from nativeforge.builder.repo import RepoInitializer

__all__ = [
    "BuildInvoker",
    "RepoInitializer",
]
