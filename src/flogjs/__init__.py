"""flog-js - complexity scoring for JavaScript and TypeScript.

Walks syntax trees and sums weights for the constructs that make code
hard to review: branches, loops, exception handling, dynamic dispatch
and conditional rendering in React components.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Import modes to trigger registration
import flogjs.modes  # noqa: F401

from flogjs.aggregate import Group, Summary, Threshold, apply_threshold, group_functions, rank
from flogjs.analyzer import Analyzer, UnitResult
from flogjs.config import ConfigError, Settings, load_config
from flogjs.mode import (
    DetectContext,
    DetectResult,
    Mode,
    ModeSelectionError,
    get_mode,
    list_modes,
    register,
    select_mode,
)
from flogjs.parser import ParseError, parse_source
from flogjs.reporter import AnalysisReport, Driver, FunctionScore, MisuseError, ScopeReporter
from flogjs.weights import WeightTable, get_weights, list_weights, register_weights


def analyze_source(
    source: str,
    file_path: str = "<source>",
    *,
    methods_only: bool = False,
    weights: dict[str, float] | None = None,
    mode: str | None = None,
) -> AnalysisReport:
    """Score one unit of JavaScript / TypeScript source.

    Args:
        source: Source text.
        file_path: Name used for grammar selection and detection.
        methods_only: If True, code outside functions is not scored.
        weights: Pattern weight overrides.
        mode: Skip detection and score with this mode.

    Returns:
        AnalysisReport with the unit total and per-function scores.
    """
    settings = Settings(methods_only=methods_only, weights=dict(weights or {}), mode=mode)
    return Analyzer(settings=settings).analyze_source(source, file_path)


def analyze_file(path: str, *, settings: Settings | None = None) -> UnitResult:
    """Read a file and score it."""
    return Analyzer(settings=settings).analyze_file(path)


def analyze_paths(
    paths: list[str],
    *,
    settings: Settings | None = None,
    keep_going: bool = False,
) -> list[UnitResult]:
    """Score every source file under ``paths``, in discovery order.

    Args:
        paths: Files and directories; directories are walked recursively.
        settings: Analysis settings (defaults apply when None).
        keep_going: If True, unparseable files become error results.

    Returns:
        One UnitResult per discovered file.
    """
    from flogjs.discovery import expand_paths

    settings = settings or Settings()
    files = expand_paths(paths, exclude=settings.exclude, include=settings.include)
    return Analyzer(settings=settings).analyze_paths(files, keep_going=keep_going)


__all__ = [
    "AnalysisReport",
    "Analyzer",
    "ConfigError",
    "DetectContext",
    "DetectResult",
    "Driver",
    "FunctionScore",
    "Group",
    "MisuseError",
    "Mode",
    "ModeSelectionError",
    "ParseError",
    "ScopeReporter",
    "Settings",
    "Summary",
    "Threshold",
    "UnitResult",
    "WeightTable",
    "analyze_file",
    "analyze_paths",
    "analyze_source",
    "apply_threshold",
    "get_mode",
    "get_weights",
    "group_functions",
    "list_modes",
    "list_weights",
    "load_config",
    "parse_source",
    "rank",
    "register",
    "register_weights",
    "select_mode",
]
