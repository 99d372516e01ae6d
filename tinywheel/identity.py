"""
tinywheel.identity - Author identity lookup from git

The resolver infers `author` and `email` from the user's global git config
(user.name and user.email). Lookups never raise: a missing git binary, an
unset key or a failing command all mean "no value".
"""

import shutil
import subprocess
from typing import Optional


def system_has_git() -> bool:
    return shutil.which("git") is not None


def git_global_config(config_key: str) -> Optional[str]:
    """
    Fetch a value out of the global git config.

    Args:
        config_key: A git config key, e.g. "user.name"

    Returns:
        The stripped value, or None if git is unavailable or the key is unset.
    """
    if not system_has_git():
        return None

    try:
        result = subprocess.run(
            ["git", "config", "--global", config_key],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return None

    if result.returncode != 0:
        return None

    value = result.stdout.strip()
    return value or None


def no_identity(config_key: str) -> None:
    """Identity lookup that never finds anything."""
    return None
