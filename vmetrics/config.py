"""Configuration constants and dataclasses for vertical metrics editing."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# --- CLI defaults ---
DEFAULT_ASCENT_PERCENT: float = 90.0
DEFAULT_DESCENT_PERCENT: float = 22.0
DEFAULT_LINE_GAP: float = 0.0

# --- Field ranges ---
INT16_MIN: int = -32768
INT16_MAX: int = 32767

# fsSelection bit 7: prefer sTypo* metrics over usWin*/hhea (OS/2 version >= 4)
USE_TYPO_METRICS_BIT: int = 7
USE_TYPO_METRICS_MIN_OS2_VERSION: int = 4

# --- File naming ---
OUTPUT_SUFFIX: str = "-fixed"
SFNT_EXTENSIONS: Tuple[str, ...] = (".ttf", ".otf")
# Output extension -> fontTools flavor
COMPRESSED_EXTENSIONS: Dict[str, str] = {
    ".woff2": "woff2",
    ".woff": "woff",
}
COMPRESSOR_OUTPUT_EXTENSION: str = ".woff2"

# Extension (without dot) -> CSS @font-face format() keyword
CSS_FORMATS: Dict[str, str] = {
    "woff2": "woff2",
    "woff": "woff",
    "ttf": "truetype",
    "otf": "opentype",
}

# hhea fields carried over verbatim when the table is rebuilt, with the value
# used when the source table lacks the attribute (None = required).
HHEA_PASSTHROUGH_FIELDS: Tuple[Tuple[str, Optional[int]], ...] = (
    ("tableVersion", 0x00010000),
    ("advanceWidthMax", None),
    ("minLeftSideBearing", None),
    ("minRightSideBearing", None),
    ("xMaxExtent", None),
    ("caretSlopeRise", None),
    ("caretSlopeRun", None),
    ("caretOffset", None),
    ("reserved0", 0),
    ("reserved1", 0),
    ("reserved2", 0),
    ("reserved3", 0),
    ("metricDataFormat", 0),
    ("numberOfHMetrics", None),
)

# Combined ascent+descent outside this band (% of UPM) gets a warning
TYPICAL_SPAN_RANGE: Tuple[float, float] = (80.0, 160.0)


@dataclass
class MetricsConfig:
    """User-level metric targets.

    Ascent and descent are percentages of the em size. Descent is given as an
    unsigned percentage and always stored as a negative font-unit value.
    """

    ascent_percent: float = DEFAULT_ASCENT_PERCENT
    descent_percent: float = DEFAULT_DESCENT_PERCENT
    line_gap: float = DEFAULT_LINE_GAP  # font units, not a percentage
