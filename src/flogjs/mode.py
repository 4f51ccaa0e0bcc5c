"""Base mode interface, mode registry and mode selection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Sequence

from tree_sitter import Tree

from flogjs.reporter import AnalysisReport, ScopeReporter
from flogjs.weights import WeightTable, get_weights

if TYPE_CHECKING:
    from flogjs.config import Settings


class ModeSelectionError(Exception):
    """Raised when no mode can be chosen for a source unit."""


@dataclass(frozen=True)
class DetectContext:
    """Read-only view of a source unit shared by all detectors."""

    file_path: str
    source: str
    tree: Tree
    extension: str
    config: Settings | None = None


@dataclass
class DetectResult:
    """How confident a mode is that it applies to a source unit."""

    mode: str
    confidence: float  # 0.0 (does not apply) to 1.0
    reasons: list[str] = field(default_factory=list)
    force: bool = False  # wins regardless of any other confidence

    def __post_init__(self):
        self.confidence = max(0.0, min(1.0, self.confidence))

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dict."""
        d: dict[str, Any] = {
            "mode": self.mode,
            "confidence": round(self.confidence, 3),
            "reasons": list(self.reasons),
        }
        if self.force:
            d["force"] = True
        return d


class Mode(ABC):
    """Base class for scoring modes.

    A mode pairs a detector, which says how well it fits a source unit, with
    a scorer, which walks the unit's syntax tree and feeds weighted drivers
    into a ScopeReporter.
    """

    name: ClassVar[str]
    description: ClassVar[str]

    def __init__(self, weights: WeightTable | None = None):
        if weights is None:
            try:
                weights = get_weights(self.name)
            except KeyError:
                weights = WeightTable(mode=self.name, description=self.description)
        self.weights = weights

    @abstractmethod
    def detect(self, ctx: DetectContext) -> DetectResult:
        """Estimate whether this mode applies to the unit."""
        ...

    @abstractmethod
    def analyze(self, ctx: DetectContext, reporter: ScopeReporter) -> AnalysisReport:
        """Score the unit and return ``reporter.finalize()``."""
        ...


def select_mode(
    candidates: Sequence[tuple[Mode, DetectResult]],
) -> tuple[Mode, DetectResult]:
    """Pick the winning mode from detection results in registration order.

    The first forced result wins outright. Otherwise the highest confidence
    wins and ties go to the earlier registration.

    Raises:
        ModeSelectionError: If there are no candidates.
    """
    if not candidates:
        raise ModeSelectionError("No modes available to select from")

    for mode, result in candidates:
        if result.force:
            return mode, result

    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate[1].confidence > best[1].confidence:
            best = candidate
    return best


# --- Mode Registry ---

_registry: dict[str, type[Mode]] = {}


def register(cls: type[Mode]) -> type[Mode]:
    """Decorator to register a mode class."""
    _registry[cls.name] = cls
    return cls


def get_mode(name: str, weights: WeightTable | None = None) -> Mode:
    """Instantiate a registered mode by name."""
    if name not in _registry:
        available = ", ".join(sorted(_registry.keys()))
        raise KeyError(f"Unknown mode: {name!r}. Available: {available}")
    return _registry[name](weights)


def list_modes() -> dict[str, str]:
    """Return {name: description} for all registered modes."""
    return {name: cls.description for name, cls in sorted(_registry.items())}
