"""Application functions for writing computed metrics into OS/2 and hhea."""

from typing import Dict, List, Tuple

from fontTools.ttLib import TTFont, newTable

from . import config
from .errors import FontMetricsError, MissingTable
from .models import VerticalMetrics

# key -> (old, new); keys are OS/2 attribute names or "hhea.<attr>"
Changes = Dict[str, Tuple[int, int]]

OS2_KEYS = (
    "sTypoAscender",
    "sTypoDescender",
    "sTypoLineGap",
    "usWinAscent",
    "usWinDescent",
    "fsSelection",
)
HHEA_KEYS = ("hhea.ascent", "hhea.descent", "hhea.lineGap")


def set_use_typo_metrics(fs_selection: int) -> int:
    return int(fs_selection or 0) | (1 << config.USE_TYPO_METRICS_BIT)


def update_os2(os2, metrics: VerticalMetrics) -> Changes:
    """Set typo metrics, Windows magnitudes and USE_TYPO_METRICS in place."""
    old_vals = {key: int(getattr(os2, key, 0) or 0) for key in OS2_KEYS}
    new_vals = {
        "sTypoAscender": metrics.ascent,
        "sTypoDescender": metrics.descent,
        "sTypoLineGap": metrics.line_gap,
        # usWin* are unsigned magnitudes even though the descender is negative
        "usWinAscent": abs(metrics.ascent),
        "usWinDescent": abs(metrics.descent),
        "fsSelection": set_use_typo_metrics(old_vals["fsSelection"]),
    }
    for key, value in new_vals.items():
        setattr(os2, key, int(value))
    return {key: (old_vals[key], new_vals[key]) for key in OS2_KEYS}


def build_hhea(original, metrics: VerticalMetrics):
    """Build a fresh hhea table: pass-through fields copied, metrics replaced."""
    table = newTable("hhea")
    for attr, default in config.HHEA_PASSTHROUGH_FIELDS:
        value = getattr(original, attr, default)
        if value is None:
            value = default if default is not None else 0
        setattr(table, attr, value)
    table.ascent = int(metrics.ascent)
    table.descent = int(metrics.descent)
    table.lineGap = int(metrics.line_gap)
    return table


def replace_hhea(font: TTFont, metrics: VerticalMetrics) -> Changes:
    """Swap the hhea table for a rebuilt one.

    Attribute edits on the loaded hhea object are not always carried through
    to the compiled output, so the table object itself is replaced.
    """
    original = font["hhea"]
    old_vals = {
        "hhea.ascent": int(getattr(original, "ascent", 0) or 0),
        "hhea.descent": int(getattr(original, "descent", 0) or 0),
        "hhea.lineGap": int(getattr(original, "lineGap", 0) or 0),
    }
    font["hhea"] = build_hhea(original, metrics)
    new_vals = {
        "hhea.ascent": metrics.ascent,
        "hhea.descent": metrics.descent,
        "hhea.lineGap": metrics.line_gap,
    }
    return {key: (old_vals[key], new_vals[key]) for key in HHEA_KEYS}


def apply_metrics(
    font: TTFont, metrics: VerticalMetrics
) -> Tuple[Changes, List[FontMetricsError]]:
    """Apply computed metrics to both metrics tables of ``font``.

    A missing table is reported as a MissingTable issue and skipped; the other
    table is still edited.

    Returns:
        Tuple of (changes, issues) where changes maps each touched field to
        its (old, new) value
    """
    changes: Changes = {}
    issues: List[FontMetricsError] = []

    if "OS/2" in font:
        changes.update(update_os2(font["OS/2"], metrics))
    else:
        issues.append(MissingTable("Font has no OS/2 table", tag="OS/2"))

    if "hhea" in font:
        changes.update(replace_hhea(font, metrics))
    else:
        issues.append(MissingTable("Font has no hhea table", tag="hhea"))

    return changes, issues


def changed_keys(changes: Changes) -> List[str]:
    return [key for key, (old, new) in changes.items() if old != new]
