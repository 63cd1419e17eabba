"""Staged diff helpers.

Contains:
- extract_changed_files: List file paths named in a unified diff
"""

import re

# Matches "diff --git a/<old> b/<new>"
_DIFF_HEADER_RE = re.compile(r"^diff --git a/(?P<old>.+?) b/(?P<new>.+)$")


def extract_changed_files(diff: str) -> list[str]:
    """Extract the changed file paths from a unified git diff.

    Renames report the new path. Paths appear once, in diff order.

    Args:
        diff: Output of git diff.

    Returns:
        List of file paths.
    """
    files: list[str] = []
    for line in diff.splitlines():
        match = _DIFF_HEADER_RE.match(line)
        if match:
            path = match.group("new")
            if path not in files:
                files.append(path)
    return files
