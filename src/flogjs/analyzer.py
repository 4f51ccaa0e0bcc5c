"""Analyzer: detect the best mode for each source unit and score it."""

from __future__ import annotations

import copy
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePath
from typing import Sequence

from tree_sitter import Tree

# Import modes to trigger registration
import flogjs.modes  # noqa: F401
from flogjs.config import Settings, load_modes
from flogjs.mode import (
    DetectContext,
    DetectResult,
    Mode,
    ModeSelectionError,
    get_mode,
    select_mode,
)
from flogjs.parser import ParseError, parse_source
from flogjs.reporter import AnalysisReport, FunctionScore, ScopeReporter

logger = logging.getLogger(__name__)

BUILTIN_MODES = ("lang", "react")


@dataclass
class UnitResult:
    """Outcome of analyzing one file."""

    file: str
    mode: str
    report: AnalysisReport | None = None
    reasons: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def total(self) -> float:
        return self.report.total if self.report is not None else 0.0

    @property
    def functions(self) -> tuple[FunctionScore, ...]:
        return self.report.functions if self.report is not None else ()

    def to_dict(self, include_functions: bool = True) -> dict:
        """Convert to a JSON-serializable dict."""
        data: dict = {
            "file": self.file,
            "mode": self.mode,
            "total": round(self.total, 3),
        }
        if include_functions:
            data["functions"] = [f.to_dict() for f in self.functions]
        if self.error is not None:
            data["error"] = self.error
        return data


class Analyzer:
    """Detect-then-score pipeline over the built-in and any external modes.

    Usage:
        analyzer = Analyzer()  # lang + react
        analyzer = Analyzer(modes=[MyMode()])  # plus an external mode
        report = analyzer.analyze_source(source, "app.jsx")
    """

    def __init__(
        self,
        modes: Sequence[Mode] | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or Settings()
        overrides = self.settings.weights

        candidates = [get_mode(name) for name in BUILTIN_MODES]
        candidates += list(modes or [])
        candidates += load_modes(self.settings.modes)

        # copies, so caller-supplied modes keep their own weights
        self.modes: list[Mode] = []
        for mode in candidates:
            mode = copy.copy(mode)
            mode.weights = mode.weights.with_overrides(overrides)
            self.modes.append(mode)
        if not self.modes:
            raise ModeSelectionError("Analyzer needs at least one mode")

        self._forced: Mode | None = None
        if self.settings.mode is not None:
            self._forced = self.get(self.settings.mode)

    def get(self, name: str) -> Mode:
        """Look up one of this analyzer's modes by name."""
        for mode in self.modes:
            if mode.name == name:
                return mode
        available = ", ".join(m.name for m in self.modes)
        raise ModeSelectionError(f"Unknown mode: {name!r}. Available: {available}")

    def context(self, tree: Tree, file_path: str, source: str) -> DetectContext:
        return DetectContext(
            file_path=file_path,
            source=source,
            tree=tree,
            extension=PurePath(file_path).suffix,
            config=self.settings,
        )

    def detect(self, ctx: DetectContext) -> list[tuple[Mode, DetectResult]]:
        """Run every mode's detector against the same context."""
        return [(mode, mode.detect(ctx)) for mode in self.modes]

    def detect_best(
        self, tree: Tree, file_path: str, source: str
    ) -> tuple[Mode, DetectResult]:
        """Choose the mode that should score this unit."""
        if self._forced is not None:
            return self._forced, DetectResult(
                mode=self._forced.name, confidence=1.0, reasons=["config"], force=True,
            )

        candidates = self.detect(self.context(tree, file_path, source))
        mode, result = select_mode(candidates)
        logger.debug(
            "%s: mode=%s confidence=%.2f reasons=%s",
            file_path, mode.name, result.confidence, ",".join(result.reasons) or "-",
        )
        return mode, result

    def analyze(
        self, tree: Tree, file_path: str, source: str, mode: Mode
    ) -> AnalysisReport:
        """Score a unit with ``mode`` using a fresh reporter."""
        reporter = ScopeReporter(methods_only=self.settings.methods_only)
        report = mode.analyze(self.context(tree, file_path, source), reporter)
        return replace(report, mode=mode.name)

    def analyze_source(self, source: str, file_path: str = "<source>") -> AnalysisReport:
        """Parse, detect and score one unit of source text.

        Raises:
            ParseError: If the source does not parse.
        """
        return self.run(source, file_path).report

    def run(self, source: str, file_path: str) -> UnitResult:
        tree = parse_source(source, file_path)
        mode, result = self.detect_best(tree, file_path, source)
        report = self.analyze(tree, file_path, source, mode)
        return UnitResult(file=file_path, mode=mode.name, report=report, reasons=list(result.reasons))

    def analyze_file(self, path: str | Path) -> UnitResult:
        """Read and analyze a single file."""
        file_path = str(path)
        logger.debug("Analyzing %s", file_path)
        source = Path(path).read_text(encoding="utf-8")
        return self.run(source, file_path)

    def analyze_paths(
        self,
        paths: Sequence[str | Path],
        keep_going: bool = False,
        max_workers: int = 8,
    ) -> list[UnitResult]:
        """Analyze many files in parallel, preserving input order.

        Each file runs its own detect-and-score pipeline. With ``keep_going``
        a file that cannot be read or parsed becomes an error result instead
        of aborting the batch.
        """
        def _analyze_one(path: str | Path) -> UnitResult:
            try:
                return self.analyze_file(path)
            except (ParseError, OSError, UnicodeDecodeError) as e:
                if not keep_going:
                    raise
                logger.warning("Skipping %s: %s", path, e)
                return UnitResult(file=str(path), mode="error", error=str(e))

        if not paths:
            return []
        workers = min(len(paths), max_workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(_analyze_one, paths))
