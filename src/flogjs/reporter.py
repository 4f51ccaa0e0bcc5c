"""Scope-tracking reporter.

Scorers feed weighted events ("drivers") into a ScopeReporter while they walk
a syntax tree. The reporter attributes each event to the innermost open
function scope, keeps a running total for the whole unit, and turns every
closed scope into an immutable FunctionScore.
"""

from __future__ import annotations

from dataclasses import dataclass, field

ANONYMOUS = "<anonymous>"
TOP_DRIVERS = 5


class MisuseError(RuntimeError):
    """Raised when the reporter's enter/exit protocol is violated."""


@dataclass(frozen=True)
class Driver:
    """One weighted scoring event."""

    kind: str
    weight: float
    message: str | None = None

    def to_dict(self) -> dict:
        d: dict = {"kind": self.kind, "weight": round(self.weight, 3)}
        if self.message:
            d["message"] = self.message
        return d


@dataclass(frozen=True)
class FunctionScore:
    """Finalized score for one function-like scope."""

    name: str
    score: float
    start: int  # 1-based line
    end: int
    top_drivers: tuple[Driver, ...] = ()
    all_drivers: tuple[Driver, ...] = ()
    group: str | None = None  # enclosing class or component

    @property
    def loc(self) -> tuple[int, int]:
        return self.start, self.end

    def to_dict(self, include_drivers: bool = True) -> dict:
        """Convert to a JSON-serializable dict."""
        d: dict = {
            "name": self.name,
            "score": round(self.score, 3),
            "loc": {"start": self.start, "end": self.end},
            "group": self.group,
        }
        if include_drivers:
            d["drivers"] = [drv.to_dict() for drv in self.top_drivers]
        return d


@dataclass(frozen=True)
class AnalysisReport:
    """Scores for one source unit, functions in the order their scopes closed."""

    total: float
    functions: tuple[FunctionScore, ...] = ()
    mode: str | None = None

    def to_dict(self, include_drivers: bool = True) -> dict:
        """Convert to a JSON-serializable dict."""
        return {
            "mode": self.mode,
            "total": round(self.total, 3),
            "functions": [f.to_dict(include_drivers) for f in self.functions],
        }


@dataclass
class _Frame:
    name: str
    start: int
    end: int
    group: str | None
    score: float = 0.0
    drivers: list[Driver] = field(default_factory=list)


class ScopeReporter:
    """Stack-based accumulator of weighted drivers.

    One reporter is created per source unit and must not be shared between
    traversals.

    Args:
        methods_only: Drop weight recorded while no function scope is open,
            including from the unit total.
    """

    def __init__(self, methods_only: bool = False):
        self.methods_only = methods_only
        self._stack: list[_Frame] = []
        self._functions: list[FunctionScore] = []
        self._total = 0.0
        self._current_group: str | None = None

    @property
    def depth(self) -> int:
        """Number of currently open function scopes."""
        return len(self._stack)

    @property
    def current_group(self) -> str | None:
        return self._current_group

    def add(self, weight: float, kind: str = "other", message: str | None = None) -> None:
        """Record ``weight`` against the unit and the innermost open scope."""
        if self.methods_only and not self._stack:
            return

        self._total += weight
        if self._stack:
            top = self._stack[-1]
            top.score += weight
            top.drivers.append(Driver(kind=kind, weight=weight, message=message))

    def enter_function(
        self, name: str | None, start: int, end: int, group: str | None = None
    ) -> None:
        """Open a new function scope.

        ``group`` defaults to the class or component currently entered.
        """
        self._stack.append(_Frame(
            name=name or ANONYMOUS,
            start=start,
            end=end,
            group=group if group is not None else self._current_group,
        ))

    def exit_function(self) -> FunctionScore:
        """Close the innermost function scope and finalize its score."""
        if not self._stack:
            raise MisuseError("exit_function() called with no open function scope")
        frame = self._stack.pop()

        # sorted() is stable: equal weights keep insertion order
        drivers = tuple(sorted(frame.drivers, key=lambda d: d.weight, reverse=True))
        scored = FunctionScore(
            name=frame.name,
            score=frame.score,
            start=frame.start,
            end=frame.end,
            top_drivers=drivers[:TOP_DRIVERS],
            all_drivers=drivers,
            group=frame.group,
        )
        self._functions.append(scored)
        return scored

    def enter_class(self, name: str | None) -> None:
        """Set the group name for function scopes opened from now on.

        Single slot: a nested class replaces the outer name and its exit
        clears the slot rather than restoring the outer name.
        """
        self._current_group = name or ANONYMOUS

    def exit_class(self) -> None:
        self._current_group = None

    def finalize(self) -> AnalysisReport:
        """Return the report for the unit.

        Raises:
            MisuseError: If function scopes are still open.
        """
        if self._stack:
            open_names = ", ".join(f.name for f in self._stack)
            raise MisuseError(f"finalize() called with open function scopes: {open_names}")
        return AnalysisReport(total=self._total, functions=tuple(self._functions))
