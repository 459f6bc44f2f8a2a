from __future__ import annotations

import os


def split_path(path: str) -> tuple[str, str]:
    """Split ``path`` into its directory part and its final name.

    A trailing separator leaves an empty name, so ``"src/"`` becomes
    ``("src", "")`` and joins back to ``"src"``.
    """
    return os.path.split(path)


def join_path(directory: str, name: str) -> str:
    if not directory:
        return name
    if not name:
        return directory
    return os.path.join(directory, name)


def normalize_for_compare(path: str) -> str:
    return os.path.normcase(os.path.abspath(path))
