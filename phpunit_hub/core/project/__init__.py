"""Project layout resolution - root directory, runner binary, installed versions."""

from .resolver import ProjectRootResolver, get_bin_dir, get_package_version, runner_executable

__all__ = [
    "ProjectRootResolver",
    "get_bin_dir",
    "get_package_version",
    "runner_executable",
]
