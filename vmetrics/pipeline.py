"""Pipeline orchestration: load, inspect, edit, patch, transcode, write.

States run strictly forward:

    LOADED -> (DECOMPRESSED) -> INSPECTED -> [stop if list-only]
    -> METRICS_COMPUTED -> EDITED -> SERIALIZED -> PATCHED
    -> (COMPRESSED) -> WRITTEN

Any fatal FontMetricsError moves the run to FAILED and is stored on the result.
"""

from pathlib import Path
from typing import Optional, Union

from . import application
from . import console_styles as cs
from . import font_io
from . import patching
from . import planning
from . import reporting
from . import transcode
from . import validation
from .config import USE_TYPO_METRICS_MIN_OS2_VERSION, MetricsConfig
from .errors import FontMetricsError, InputNotFound
from .logging_config import Verbosity, get_logger
from .models import PipelineResult, PipelineState

console = cs.get_console()
logger = get_logger(__name__)

PathLike = Union[str, Path]


def run_pipeline(
    input_path: PathLike,
    output_path: Optional[PathLike] = None,
    metrics_config: Optional[MetricsConfig] = None,
    *,
    list_only: bool = False,
    verbosity: Verbosity = Verbosity.BRIEF,
    verify: Optional[bool] = None,
) -> PipelineResult:
    """Run one font through the metrics pipeline.

    Args:
        input_path: TTF, OTF, WOFF or WOFF2 file
        output_path: Destination; defaults to ``<stem>-fixed<ext>``. A .woff2
            or .woff extension compresses the patched font on the way out.
        metrics_config: Ascent/descent percentages and line gap
        list_only: Report current metrics and stop; nothing is written
        verbosity: BRIEF prints only warnings and the result line
        verify: Re-read the written file; defaults to on when verbose

    Returns:
        PipelineResult; fatal errors are stored in ``result.error`` with the
        state set to FAILED rather than raised.
    """
    metrics_config = metrics_config or MetricsConfig()
    if verify is None:
        verify = verbosity >= Verbosity.VERBOSE
    result = PipelineResult(str(input_path))
    result.list_only = list_only

    try:
        _run(
            result,
            Path(input_path),
            output_path,
            metrics_config,
            list_only,
            verbosity,
            verify,
        )
    except FontMetricsError as e:
        logger.debug("Pipeline failed in state %s", result.state, exc_info=True)
        result.fail(e)
    return result


def _run(
    result: PipelineResult,
    input_path: Path,
    output_path: Optional[PathLike],
    metrics_config: MetricsConfig,
    list_only: bool,
    verbosity: Verbosity,
    verify: bool,
) -> None:
    verbose = verbosity >= Verbosity.VERBOSE

    raw = font_io.read_font_bytes(input_path)
    result.input_size = len(raw)
    result.input_flavor = transcode.sniff_flavor(raw)
    result.advance(PipelineState.LOADED)
    logger.debug(
        "Loaded %s (%d bytes, flavor=%s)", input_path, len(raw), result.input_flavor
    )

    if result.input_flavor is not None and list_only:
        # Compressed container is read as-is; no decompression for a listing
        result.before = font_io.snapshot_from_bytes(raw, str(input_path))
        result.advance(PipelineState.INSPECTED)
        reporting.report_snapshot(result.before, console)
        return

    if result.input_flavor is not None:
        sfnt_data = transcode.unwrap(raw)
        result.advance(PipelineState.DECOMPRESSED)
        if verbose:
            cs.StatusIndicator("info").add_message(
                f"Decompressed {result.input_flavor.upper()} to SFNT: "
                f"{cs.fmt_bytes(len(sfnt_data))}"
            ).add_item(f"First 4 bytes: {sfnt_data[:4].hex(' ')}").emit(console)
    else:
        sfnt_data = raw

    font = font_io.load_font(sfnt_data)
    try:
        with font_io.table_errors("read metrics tables"):
            result.before = font_io.read_snapshot(font, str(input_path))
        result.before.flavor = result.input_flavor
        result.advance(PipelineState.INSPECTED)
        if verbose or list_only:
            reporting.report_snapshot(result.before, console)
        if list_only:
            return

        upm = font_io.get_upm(font)
        metrics = planning.compute_metrics(
            upm,
            metrics_config.ascent_percent,
            metrics_config.descent_percent,
            metrics_config.line_gap,
        )
        result.metrics = metrics
        result.advance(PipelineState.METRICS_COMPUTED)
        if verbose:
            reporting.report_new_metrics(metrics, metrics_config, upm, console)

        with font_io.table_errors("edit metrics tables"):
            changes, issues = application.apply_metrics(font, metrics)
        result.issues.extend(issues)
        result.advance(PipelineState.EDITED)
        if (
            verbose
            and result.before.has_os2
            and (result.before.os2_version or 0) < USE_TYPO_METRICS_MIN_OS2_VERSION
        ):
            cs.StatusIndicator("info").add_message(
                f"OS/2 version {result.before.os2_version}: USE_TYPO_METRICS "
                f"is only defined from version {USE_TYPO_METRICS_MIN_OS2_VERSION}"
            ).emit(console)

        serialized = font_io.serialize_font(font)
        sfnt_version = font.sfntVersion.encode("latin-1")
    finally:
        font.close()
    result.advance(PipelineState.SERIALIZED)

    patch = patching.patch_hhea(serialized, metrics)
    result.issues.extend(patch.issues)
    result.patch_offset = patch.offset
    result.advance(PipelineState.PATCHED)
    if verbose:
        reporting.report_patch(patch, metrics, console)

    if output_path is None:
        output_path = validation.default_output_path(input_path, sfnt_version)
    output_path = Path(output_path)

    data = patch.data
    flavor = validation.output_flavor(output_path)
    if flavor is not None:
        data = transcode.compress(data, flavor)
        result.advance(PipelineState.COMPRESSED)

    result.output_path = font_io.write_font_bytes(output_path, data)
    result.output_size = len(data)
    result.advance(PipelineState.WRITTEN)

    if verbose:
        reporting.report_changes(result.output_path, changes, console)
    if verify:
        result.issues.extend(validation.verify_output(output_path, metrics))
        if verbose:
            result.after = font_io.snapshot_from_bytes(data, result.output_path)
            reporting.report_snapshot(
                result.after, console, title="Verified metrics:"
            )

    reporting.report_issues(result.issues, console)


def run_compressor(
    input_path: PathLike,
    output_path: Optional[PathLike] = None,
    *,
    verbosity: Verbosity = Verbosity.BRIEF,
) -> PipelineResult:
    """Compress a TTF/OTF file to WOFF2 as a separate, explicit step."""
    result = PipelineResult(str(input_path))
    try:
        input_path = Path(input_path)
        if not input_path.is_file():
            raise InputNotFound(f"Input file not found: {input_path}")
        validation.check_compressor_input(input_path)
        raw = font_io.read_font_bytes(input_path)
        result.input_size = len(raw)
        result.input_flavor = transcode.sniff_flavor(raw)
        result.advance(PipelineState.LOADED)
        if verbosity >= Verbosity.VERBOSE:
            cs.StatusIndicator("info").add_message(
                f"Reading input file: {cs.fmt_file(str(input_path))} "
                f"({cs.fmt_bytes(len(raw))})"
            ).add_item("Compressing to WOFF2...").emit(console)

        data = transcode.compress(raw)
        result.advance(PipelineState.COMPRESSED)

        if output_path is None:
            output_path = validation.compressor_output_path(input_path)
        result.output_path = font_io.write_font_bytes(output_path, data)
        result.output_size = len(data)
        result.advance(PipelineState.WRITTEN)
    except FontMetricsError as e:
        logger.debug("Compression failed in state %s", result.state, exc_info=True)
        result.fail(e)
    return result
