"""Source locations and collection of compiler diagnostics."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import IO


@dataclass(frozen=True)
class SourceLocation:
    """A position inside a module's source."""

    module: str
    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.module}:{self.line}:{self.col}"


@dataclass(frozen=True)
class Diagnostic:
    """A single error or warning."""

    loc: SourceLocation | None
    message: str
    is_warning: bool = False

    def __str__(self) -> str:
        kind = "warning" if self.is_warning else "error"
        if self.loc is None:
            return f"{kind}: {self.message}"
        return f"{self.loc}: {kind}: {self.message}"


class TooManyErrors(Exception):
    """Raised when the number of reported errors reaches the configured limit."""

    def __init__(self, count: int) -> None:
        super().__init__(f"too many errors ({count})")
        self.count = count


def _fragment(arg: object) -> str:
    if isinstance(arg, bool):
        return str(int(arg))
    if isinstance(arg, float):
        return f"{arg:f}"
    return str(arg)


@dataclass
class Diagnostics:
    """Collects errors and warnings, optionally echoing them to a stream."""

    max_errors: int | None = None
    stream: IO[str] | None = None
    items: list[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if not d.is_warning]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.is_warning]

    def _report(self, loc: SourceLocation | None, is_warning: bool, args: tuple) -> Diagnostic:
        diag = Diagnostic(loc, "".join(_fragment(a) for a in args), is_warning)
        self.items.append(diag)
        if self.stream is not None:
            print(diag, file=self.stream)
        return diag

    def error(self, loc: SourceLocation | None, *args: object) -> Diagnostic:
        """Record an error built by concatenating ``args``."""
        diag = self._report(loc, False, args)
        count = len(self.errors)
        if self.max_errors is not None and count >= self.max_errors:
            raise TooManyErrors(count)
        return diag

    def warn(self, loc: SourceLocation | None, *args: object) -> Diagnostic:
        """Record a warning built by concatenating ``args``."""
        return self._report(loc, True, args)

    def clear(self) -> None:
        """Forget every recorded diagnostic."""
        self.items.clear()


def stderr_diagnostics(max_errors: int | None = None) -> Diagnostics:
    """Diagnostics that echo to standard error."""
    return Diagnostics(max_errors=max_errors, stream=sys.stderr)