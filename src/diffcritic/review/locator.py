"""Git repository root discovery."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from diffcritic.exceptions import NoRepositoryError

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30


def is_repository_root(candidate: Path) -> bool:
    """True if git accepts ``candidate`` as a repository and it holds the .git marker.

    The marker may be a directory or, for worktrees and submodules, a file.
    """
    try:
        subprocess.run(
            ["git", "rev-parse", "--git-dir"],
            cwd=candidate,
            capture_output=True,
            text=True,
            check=True,
            timeout=GIT_TIMEOUT,
        )
    except FileNotFoundError:
        logger.warning("git not found while checking %s", candidate)
        raise NoRepositoryError("git not found. Ensure git is installed.") from None
    except subprocess.CalledProcessError as e:
        logger.debug("Not a git repository: %s (%s)", candidate, (e.stderr or "").strip())
        return False
    except subprocess.TimeoutExpired:
        logger.debug("git rev-parse timed out in %s", candidate)
        return False
    return (candidate / ".git").exists()


def find_repository_root(start_dir: Path) -> Path | None:
    """Walk upward from ``start_dir`` and return the first repository root, or None."""
    current = Path(start_dir).resolve()
    while True:
        if is_repository_root(current):
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def resolve_repository_root(anchors: list[Path]) -> Path:
    """Try each anchor directory in order; the first one inside a repository wins.

    Raises NoRepositoryError when every anchor is exhausted.
    """
    for anchor in anchors:
        root = find_repository_root(anchor)
        if root is not None:
            logger.debug("Git root %s found from anchor %s", root, anchor)
            return root
        logger.debug("No git repository above %s", anchor)
    tried = ", ".join(str(a) for a in anchors) or "<none>"
    raise NoRepositoryError(f"No git repository found for this file (searched from {tried})")
