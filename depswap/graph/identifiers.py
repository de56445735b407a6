"""Identifier helpers for workspace projects.

Provides a single place to construct canonical project identifiers. A
project is addressed by its build path (``:app``, ``:feature:login``);
``ProjectId`` interns those paths so that identity comparisons replace
string comparisons throughout the rewrite engine.
"""

from __future__ import annotations

import threading
from typing import Dict, Union

ROOT_PATH = ":"


def normalize_project_path(path: str) -> str:
    """Normalize a project path to its canonical form.

    Args:
        path: Raw project path such as ``app``, ``:app`` or ``:lib:core:``.

    Returns:
        Canonical path like ``:app`` or ``:lib:core``; ``:`` for the root.
    """
    text = str(path).strip()
    if not text or text == ROOT_PATH:
        return ROOT_PATH

    segments = [segment.strip() for segment in text.split(":") if segment.strip()]
    if not segments:
        return ROOT_PATH
    return ROOT_PATH + ":".join(segments)


class ProjectId:
    """Interned identifier of a workspace project.

    Use :meth:`of` to construct; equal paths always yield the identical
    object, so ``is`` and ``==`` agree.

    The intern table is process-wide and never shrinks. One entry per
    project path is fine for a single CLI run over one workspace; long-lived
    processes loading many unrelated workspaces keep every path they saw.
    """

    __slots__ = ("path",)

    _interned: Dict[str, "ProjectId"] = {}
    _intern_lock = threading.Lock()

    def __init__(self, path: str) -> None:
        self.path = path

    @classmethod
    def of(cls, path: Union[str, "ProjectId"]) -> "ProjectId":
        """Return the interned identifier for ``path``."""
        if isinstance(path, ProjectId):
            return path
        canonical = normalize_project_path(path)
        with cls._intern_lock:
            existing = cls._interned.get(canonical)
            if existing is None:
                existing = cls(canonical)
                cls._interned[canonical] = existing
            return existing

    @property
    def name(self) -> str:
        """Last path segment (``login`` for ``:feature:login``)."""
        if self.path == ROOT_PATH:
            return ""
        return self.path.rsplit(":", 1)[-1]

    def __repr__(self) -> str:
        return f"ProjectId({self.path!r})"

    def __str__(self) -> str:
        return self.path

    def __reduce__(self):
        return (ProjectId.of, (self.path,))


PathLike = Union[str, ProjectId]
