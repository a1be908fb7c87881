"""
Version information for Catholic Schedule.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict

__version__ = "1.2.0"

# Build metadata - populated during CI/CD build process
BUILD_INFO = {
    "version": __version__,
    "git_commit": os.getenv("GITHUB_SHA", "unknown"),
    "git_branch": os.getenv("GITHUB_REF_NAME", "unknown"),
    "build_date": os.getenv("BUILD_DATE", datetime.now(timezone.utc).isoformat()),
}


def get_version() -> str:
    return __version__


def get_build_info() -> Dict[str, Any]:
    """Get a copy of the build metadata."""
    return BUILD_INFO.copy()


def print_version_info(verbose: bool = False) -> None:
    """
    Print version information to stdout.

    Args:
        verbose: Include detailed build information
    """
    print(f"Catholic Schedule v{__version__}")

    if verbose:
        info = get_build_info()
        print(f"Build Date: {info['build_date']}")
        print(f"Git Commit: {info['git_commit']}")
        print(f"Git Branch: {info['git_branch']}")


__all__ = ["__version__", "BUILD_INFO", "get_version", "get_build_info", "print_version_info"]
