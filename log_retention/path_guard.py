"""Resolve untrusted file names to paths inside the log directory."""

import os


def resolve(directory: str, name: str) -> str | None:
    """Join *name* onto *directory* and return the absolute result.

    Returns None when the normalized path is not strictly inside the
    directory (parent segments, absolute names, symlinks pointing out).
    """
    if not name or "\x00" in name:
        return None

    root = os.path.realpath(directory)
    path = os.path.realpath(os.path.join(root, name))

    if path == root:
        return None
    try:
        if os.path.commonpath([root, path]) != root:
            return None
    except ValueError:
        # Different drives on Windows
        return None
    return path
