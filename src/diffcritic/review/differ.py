"""Git diff extraction for code review."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from diffcritic.review.locator import GIT_TIMEOUT

logger = logging.getLogger(__name__)

# Fixed query order: working tree vs index, index vs HEAD, working tree vs HEAD.
DIFF_QUERIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Unstaged changes (working tree vs index)", ("diff",)),
    ("Staged changes (index vs HEAD)", ("diff", "--cached")),
    ("All changes (working tree vs HEAD)", ("diff", "HEAD")),
)


def run_diff_query(repo_root: Path, args: tuple[str, ...], relative_path: str) -> str | None:
    """Run one ``git diff`` query scoped to ``relative_path``. Returns None on failure."""
    cmd = ["git", *args, "--", relative_path]
    try:
        result = subprocess.run(
            cmd,
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=True,
            timeout=GIT_TIMEOUT,
        )
    except FileNotFoundError:
        logger.warning("git not found; skipping '%s'", " ".join(cmd))
        return None
    except subprocess.CalledProcessError as e:
        logger.warning("'%s' failed: %s", " ".join(cmd), (e.stderr or "").strip())
        return None
    except subprocess.TimeoutExpired:
        logger.warning("'%s' timed out after %d seconds", " ".join(cmd), GIT_TIMEOUT)
        return None
    return result.stdout


def collect_diff(repo_root: Path, file_path: Path) -> str:
    """Collect every non-empty diff of ``file_path`` as labelled sections.

    Returns "" when the file is unchanged in all comparisons. A query whose
    output repeats an earlier section is dropped.
    """
    relative_path = Path(os.path.relpath(file_path, repo_root)).as_posix()
    logger.debug("Collecting diff for %s in %s", relative_path, repo_root)

    sections: list[str] = []
    seen: list[str] = []
    for label, args in DIFF_QUERIES:
        output = run_diff_query(repo_root, args, relative_path)
        if not output or not output.strip():
            logger.debug("%s: no output", label)
            continue
        if output in seen:
            logger.debug("%s: identical to an earlier section, skipped", label)
            continue
        seen.append(output)
        sections.append(f"### {label}\n{output}")

    return "\n".join(sections)
