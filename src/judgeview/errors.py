# src/judgeview/errors.py
"""
Exception hierarchy.

Only file-level problems are errors: an unreachable file (FetchFailure) or a
query file with no usable entries (EmptyCatalog). Malformed lines are dropped
by the parsers unless strict mode is on, in which case StrictParseError
carries one diagnostic per rejected line. A query with zero judgments is a
normal, displayable state and has no exception.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from judgeview.types import LineDiagnostic

FetchKind = Literal["local", "connection", "http"]


class JudgeviewError(Exception):
    """Base class for all judgeview errors."""


class LoadError(JudgeviewError):
    """A load operation failed at file level; aborts the operation."""

    def hint(self) -> str:
        return f"Error: {self}"


class FetchFailure(LoadError):
    def __init__(self, name: str, reason: str, kind: FetchKind = "http") -> None:
        self.name = name
        self.reason = reason
        self.kind = kind
        super().__init__(f"Failed to fetch {name}: {reason}")

    def hint(self) -> str:
        if self.kind == "connection":
            return (
                f"{self}\n"
                "The data server could not be reached. Serve the dataset directory over HTTP, "
                "e.g. `python3 -m http.server 8000`, then point --source at http://localhost:8000"
            )
        if self.kind == "local":
            return (
                f"{self}\n"
                "Check that --source points at the directory holding the dataset files "
                "and that the dataset name is spelled correctly."
            )
        return f"Error: {self}"


class CatalogLoadError(LoadError):
    """No usable queries: the query file is unreachable or yields no entries."""

    def hint(self) -> str:
        if isinstance(self.__cause__, LoadError):
            return self.__cause__.hint()
        return super().hint()


class EmptyCatalog(CatalogLoadError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No queries found in {name}")


class StrictParseError(JudgeviewError):
    def __init__(self, source: str, diagnostics: Sequence[LineDiagnostic]) -> None:
        self.source = source
        self.diagnostics = list(diagnostics)
        head = "; ".join(str(d) for d in self.diagnostics[:3])
        more = f" (+{len(self.diagnostics) - 3} more)" if len(self.diagnostics) > 3 else ""
        super().__init__(f"{len(self.diagnostics)} malformed line(s) in {source}: {head}{more}")


class SessionStateError(JudgeviewError):
    """Operation not allowed in the session's current phase."""
