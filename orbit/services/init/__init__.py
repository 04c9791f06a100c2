"""Project scaffolding for ``orbit-it init``."""

from .scaffold import (
    WORKFLOW_PATH,
    InitAnswers,
    build_config,
    detect_environment,
    detect_package_manager,
    release_workflow,
    write_release_workflow,
)

__all__ = [
    "WORKFLOW_PATH",
    "InitAnswers",
    "build_config",
    "detect_environment",
    "detect_package_manager",
    "release_workflow",
    "write_release_workflow",
]
