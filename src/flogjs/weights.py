"""Per-mode weight tables for complexity scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class WeightTable:
    """A named, read-only mapping from pattern id to weight."""

    mode: str
    description: str
    weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        for kind, weight in self.weights.items():
            if weight < 0:
                raise ValueError(f"Weight for {kind!r} must be non-negative, got {weight}")
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    def get(self, kind: str, default: float = 0.0) -> float:
        return self.weights.get(kind, default)

    def __getitem__(self, kind: str) -> float:
        return self.weights[kind]

    def __contains__(self, kind: object) -> bool:
        return kind in self.weights

    def with_overrides(self, overrides: Mapping[str, float] | None) -> WeightTable:
        """Return a copy with ``overrides`` applied on top of this table."""
        if not overrides:
            return self
        merged = dict(self.weights)
        merged.update({k: float(v) for k, v in overrides.items()})
        return WeightTable(mode=self.mode, description=self.description, weights=merged)


_tables: dict[str, WeightTable] = {}


def register_weights(table: WeightTable) -> None:
    """Register a weight table under its mode name."""
    _tables[table.mode] = table


def get_weights(mode: str) -> WeightTable:
    """Get a registered weight table by mode name.

    Raises:
        KeyError: If no table is registered for the mode.
    """
    if mode not in _tables:
        available = ", ".join(sorted(_tables.keys()))
        raise KeyError(f"Unknown weight table: {mode!r}. Available: {available}")
    return _tables[mode]


def list_weights() -> dict[str, str]:
    """Return {mode: description} for all registered weight tables."""
    return {name: t.description for name, t in sorted(_tables.items())}


# --- Built-in tables ---

register_weights(WeightTable(
    mode="lang",
    description="General-purpose control flow, calls and risky dynamic constructs",
    weights={
        "if": 1.0,
        "ternary": 1.0,
        "logical": 0.5,
        "for": 1.0,
        "while": 1.0,
        "do_while": 1.0,
        "for_of": 1.0,
        "for_in": 1.0,
        "switch": 1.0,
        "case": 0.2,
        "try": 1.5,
        "catch": 0.5,
        "throw": 0.5,
        "await": 0.5,
        "yield": 0.5,
        "call": 0.1,
        "dynamic_call": 4.0,   # eval(), Function(), import()
        "deep_member": 0.2,    # a.b.c.d.e
        "logical_assign": 0.4,  # &&=, ||=, ??=
    },
))

register_weights(WeightTable(
    mode="react",
    description="Conditional rendering, JSX nesting and hook usage in components",
    weights={
        "jsx_ternary": 1.0,
        "jsx_logical": 0.6,
        "jsx_map": 0.8,
        "jsx_inline": 0.4,
        "jsx_depth_step": 0.3,
        "use_effect": 0.8,
        "use_effect_dep": 0.15,
        "use_effect_cleanup": 0.4,
        "use_layout_effect": 0.6,
        "use_context": 0.3,
        "use_reducer": 0.6,
    },
))
