"""Guidance printed when no token is available."""

from __future__ import annotations

import os

__all__ = ["auth_help"]

_GITHUB_ACTIONS_HELP = (
    "vulncheck: To use VulnCheck CLI in a GitHub Actions workflow, "
    "set the VC_TOKEN environment variable. Example:\n"
    "  env:\n"
    "    VC_TOKEN: ${{ secrets.VC_TOKEN }}\n"
)

_CI_HELP = "vulncheck: To use VulnCheck CLI in automation, set the VC_TOKEN environment variable.\n"

_DEFAULT_HELP = (
    "To get started with VulnCheck CLI, please run: vulncheck auth login\n"
    "Alternatively, populate the VC_TOKEN environment variable with a VulnCheck token "
    "acquired from the VulnCheck portal.\n"
)


def auth_help() -> str:
    """Return login guidance suited to the environment the process runs in."""
    if os.environ.get("GITHUB_ACTIONS") == "true":
        return _GITHUB_ACTIONS_HELP
    if os.environ.get("CI", ""):
        return _CI_HELP
    return _DEFAULT_HELP