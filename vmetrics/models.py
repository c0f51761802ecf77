"""Font metric data models."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .config import USE_TYPO_METRICS_BIT
from .errors import FontMetricsError


@dataclass(frozen=True)
class VerticalMetrics:
    """Computed metrics in font units, shared by OS/2 and hhea."""

    ascent: int
    descent: int
    line_gap: int


class MetricsSnapshot:
    """Current vertical metrics as stored in a font's OS/2 and hhea tables."""

    def __init__(self, path: str, upm: Optional[int]):
        self.path = path
        self.upm = upm
        self.family_name: str = "Unknown"
        self.flavor: Optional[str] = None

        # OS/2 (None when the table is absent)
        self.has_os2: bool = False
        self.os2_version: Optional[int] = None
        self.typo_ascender: Optional[int] = None
        self.typo_descender: Optional[int] = None
        self.typo_line_gap: Optional[int] = None
        self.win_ascent: Optional[int] = None
        self.win_descent: Optional[int] = None
        self.fs_selection: Optional[int] = None

        # hhea (None when the table is absent)
        self.has_hhea: bool = False
        self.hhea_ascent: Optional[int] = None
        self.hhea_descent: Optional[int] = None
        self.hhea_line_gap: Optional[int] = None

    @property
    def use_typo_metrics(self) -> Optional[bool]:
        if self.fs_selection is None:
            return None
        return bool(self.fs_selection & (1 << USE_TYPO_METRICS_BIT))

    def typo_metrics(self) -> Optional[VerticalMetrics]:
        if not self.has_os2:
            return None
        return VerticalMetrics(
            self.typo_ascender, self.typo_descender, self.typo_line_gap
        )

    def hhea_metrics(self) -> Optional[VerticalMetrics]:
        if not self.has_hhea:
            return None
        return VerticalMetrics(self.hhea_ascent, self.hhea_descent, self.hhea_line_gap)

    def tables_consistent(self) -> bool:
        """True when OS/2 typo metrics equal hhea metrics, or a table is missing."""
        typo = self.typo_metrics()
        hhea = self.hhea_metrics()
        if typo is None or hhea is None:
            return True
        return typo == hhea


class PipelineState(Enum):
    LOADED = "loaded"
    DECOMPRESSED = "decompressed"
    INSPECTED = "inspected"
    METRICS_COMPUTED = "metrics_computed"
    EDITED = "edited"
    SERIALIZED = "serialized"
    PATCHED = "patched"
    COMPRESSED = "compressed"
    WRITTEN = "written"
    FAILED = "failed"


class PipelineResult:
    """Outcome of one pipeline run: final state, artifacts and collected issues."""

    def __init__(self, input_path: str):
        self.input_path = input_path
        self.output_path: Optional[str] = None
        self.state: Optional[PipelineState] = None
        self.trail: List[PipelineState] = []
        self.list_only: bool = False

        self.input_flavor: Optional[str] = None
        self.before: Optional[MetricsSnapshot] = None
        self.after: Optional[MetricsSnapshot] = None
        self.metrics: Optional[VerticalMetrics] = None
        self.patch_offset: Optional[int] = None

        self.input_size: Optional[int] = None
        self.output_size: Optional[int] = None

        self.issues: List[FontMetricsError] = []
        self.error: Optional[FontMetricsError] = None

    def advance(self, state: PipelineState) -> None:
        self.state = state
        self.trail.append(state)

    def fail(self, error: FontMetricsError) -> None:
        self.error = error
        self.advance(PipelineState.FAILED)

    @property
    def ok(self) -> bool:
        return self.error is None and self.state is not PipelineState.FAILED

    def issues_of(self, kind: type) -> List[FontMetricsError]:
        return [issue for issue in self.issues if isinstance(issue, kind)]
