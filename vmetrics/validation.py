"""Validation functions: argument sanity, output paths, read-back checks."""

import argparse
from pathlib import Path
from typing import List, Optional, Union

from . import config
from . import console_styles as cs
from . import font_io
from . import patching
from .errors import FontMetricsError, UnsupportedFormat, VerificationFailed
from .models import VerticalMetrics

console = cs.get_console()


def validate_args(args: argparse.Namespace) -> None:
    """Warn about unusual metric targets; never fails the run."""
    if args.ascent < 50 or args.ascent > 150:
        cs.StatusIndicator("warning").add_message(
            f"ascent {args.ascent}% unusual (typically 70-110% of UPM)"
        ).emit(console)

    if args.descent < 0:
        cs.StatusIndicator("info").add_message(
            f"descent {args.descent}% given as negative; "
            "the sign is ignored and descent is always stored below the baseline"
        ).emit(console)
    elif args.descent > 60:
        cs.StatusIndicator("warning").add_message(
            f"descent {args.descent}% very deep (>60% UPM)"
        ).emit(console)

    if args.line_gap < 0:
        cs.StatusIndicator("warning").add_message(
            f"line-gap {args.line_gap} is negative - lines may overlap"
        ).emit(console)

    low, high = config.TYPICAL_SPAN_RANGE
    span = args.ascent + abs(args.descent)
    if span < low or span > high:
        cs.StatusIndicator("warning").add_message(
            f"Combined ascent ({args.ascent}%) + descent ({abs(args.descent)}%) "
            f"≈ {span}% of UPM - outside the usual {low:.0f}-{high:.0f}% range"
        ).emit(console)


def default_output_path(
    input_path: Union[str, Path], sfnt_version: Optional[bytes] = None
) -> Path:
    """``<stem>-fixed<ext>`` next to the input.

    Compressed inputs get an uncompressed extension: .otf for CFF-flavored
    fonts (sfnt version OTTO), .ttf otherwise.
    """
    path = Path(input_path)
    ext = path.suffix.lower()
    if ext in config.COMPRESSED_EXTENSIONS:
        ext = ".otf" if sfnt_version == b"OTTO" else ".ttf"
    elif not ext:
        ext = ".otf" if sfnt_version == b"OTTO" else ".ttf"
    else:
        ext = path.suffix
    return path.with_name(f"{path.stem}{config.OUTPUT_SUFFIX}{ext}")


def output_flavor(output_path: Union[str, Path]) -> Optional[str]:
    """Compression flavor named by the output extension, None for SFNT."""
    return config.COMPRESSED_EXTENSIONS.get(Path(output_path).suffix.lower())


def check_compressor_input(input_path: Union[str, Path]) -> None:
    ext = Path(input_path).suffix.lower()
    if ext not in config.SFNT_EXTENSIONS:
        shown = ext or "(no extension)"
        raise UnsupportedFormat(
            f"Unsupported input format: {shown}. Use TTF or OTF files."
        )


def compressor_output_path(input_path: Union[str, Path]) -> Path:
    path = Path(input_path)
    return path.with_suffix(config.COMPRESSOR_OUTPUT_EXTENSION)


def verify_output(
    output_path: Union[str, Path], metrics: VerticalMetrics
) -> List[FontMetricsError]:
    """Re-read the written font and compare both tables against ``metrics``.

    Returns VerificationFailed issues; an unreadable file is one issue too.
    """
    issues: List[FontMetricsError] = []
    try:
        data = font_io.read_font_bytes(output_path)
        snapshot = font_io.snapshot_from_bytes(data, str(output_path))
    except FontMetricsError as e:
        return [VerificationFailed(f"Could not verify saved font metrics: {e}")]

    expected = metrics
    for label, found in (
        ("OS/2", snapshot.typo_metrics()),
        ("hhea", snapshot.hhea_metrics()),
    ):
        if found is not None and found != expected:
            issues.append(
                VerificationFailed(
                    f"{label} metrics after save are "
                    f"{found.ascent}/{found.descent}/{found.line_gap}, expected "
                    f"{expected.ascent}/{expected.descent}/{expected.line_gap}"
                )
            )

    # The raw hhea bytes must agree with the parsed table for SFNT output
    if output_flavor(output_path) is None:
        try:
            raw = patching.read_hhea_metrics(data)
        except FontMetricsError as e:
            issues.append(VerificationFailed(f"Could not read hhea bytes: {e}"))
            raw = None
        if raw is not None and raw != expected:
            issues.append(
                VerificationFailed(
                    f"hhea bytes hold {raw.ascent}/{raw.descent}/{raw.line_gap}, "
                    f"expected {expected.ascent}/{expected.descent}/{expected.line_gap}"
                )
            )
    return issues
