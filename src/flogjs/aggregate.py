"""Ranking, threshold filtering and class/component grouping of results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Literal

from flogjs.analyzer import UnitResult
from flogjs.reporter import FunctionScore

NO_GROUP = "none"
GROUP_CUTOFF = 0.6  # share of each group's functions listed by default
DEFAULT_THRESHOLD = 60.0


@dataclass(frozen=True)
class Threshold:
    """A cutoff applied to ranked units."""

    kind: Literal["percent", "score"]
    value: float


@dataclass
class Group:
    """Functions of one unit that share a class or component name."""

    name: str  # NO_GROUP for functions outside any class/component
    total: float
    functions: list[FunctionScore] = field(default_factory=list)


@dataclass
class Summary:
    total: float
    units: int
    functions: int

    @property
    def average(self) -> float:
        """Average score per function."""
        return self.total / self.functions if self.functions else 0.0

    @property
    def average_per_unit(self) -> float:
        return self.total / self.units if self.units else 0.0


def parse_threshold(raw: str | float | int | Threshold | None) -> Threshold:
    """Parse ``60``, ``"60"`` or ``"score:10"`` into a Threshold.

    Raises:
        ValueError: On malformed or negative values.
    """
    if isinstance(raw, Threshold):
        return raw
    if raw is None:
        return Threshold("percent", DEFAULT_THRESHOLD)
    if isinstance(raw, (int, float)):
        kind, value = "percent", float(raw)
    else:
        text = raw.strip()
        if text.startswith("score:"):
            kind, value = "score", float(text.split(":", 1)[1])
        else:
            kind, value = "percent", float(text.rstrip("%"))
    if value < 0:
        raise ValueError(f"Threshold must be non-negative, got {raw!r}")
    return Threshold(kind, value)


def rank(units: Iterable[UnitResult]) -> list[UnitResult]:
    """Successful units sorted by total score, highest first."""
    return sorted((u for u in units if u.ok), key=lambda u: u.total, reverse=True)


def apply_threshold(
    units: list[UnitResult],
    threshold: Threshold | str | float | None,
    show_all: bool = False,
) -> list[UnitResult]:
    """Keep the top share of ranked units, or those at or above a minimum score."""
    ranked = rank(units)
    if show_all:
        return ranked

    cutoff = parse_threshold(threshold)
    if cutoff.kind == "score":
        return [u for u in ranked if u.total >= cutoff.value]
    keep = math.ceil(len(ranked) * cutoff.value / 100)
    return ranked[:keep]


def group_functions(
    unit: UnitResult,
    show_all: bool = False,
    show_zero: bool = False,
) -> list[Group]:
    """Bucket a unit's functions by class/component, largest subtotal first.

    The NO_GROUP bucket is always present. Subtotals cover every function in
    the bucket; the listed functions exclude zero scores unless ``show_zero``
    and are cut to the top 60% unless ``show_all``.
    """
    buckets: dict[str, list[FunctionScore]] = {NO_GROUP: []}
    for fn in unit.functions:
        buckets.setdefault(fn.group or NO_GROUP, []).append(fn)

    groups = []
    for name, funcs in buckets.items():
        ordered = sorted(funcs, key=lambda f: f.score, reverse=True)
        total = sum(f.score for f in ordered)
        if not show_zero:
            ordered = [f for f in ordered if f.score != 0]
        if not show_all:
            ordered = ordered[:math.ceil(len(ordered) * GROUP_CUTOFF)]
        groups.append(Group(name=name, total=total, functions=ordered))

    groups.sort(key=lambda g: g.total, reverse=True)
    return groups


def summarize(units: Iterable[UnitResult]) -> Summary:
    """Total score, unit count and function count over successful units."""
    ok = [u for u in units if u.ok]
    return Summary(
        total=sum(u.total for u in ok),
        units=len(ok),
        functions=sum(len(u.functions) for u in ok),
    )
