"""CLI parsing and main orchestration for the metrics editor and the compressor."""

import argparse
import sys
import time
from typing import List, Optional

from rich.markup import escape
from rich.traceback import Traceback

from . import config
from . import console_styles as cs
from . import pipeline
from . import reporting
from . import validation
from .logging_config import Verbosity, configure_logging
from .models import PipelineResult

console = cs.get_console()
err_console = cs.get_error_console()

MetricsConfig = config.MetricsConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="font-metrics",
        description="Modify font vertical metrics so every browser engine "
        "renders the same ascent, descent and line gap",
        epilog="Supported formats: TTF, OTF, WOFF, WOFF2",
    )
    parser.add_argument("input", help="Input font file path")
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        help="Output font file path (defaults to <input>-fixed.<ext>; "
        "WOFF/WOFF2 input defaults to TTF/OTF output)",
    )
    # Vertical metrics (ascent/descent as % of UPM)
    metrics = parser.add_argument_group("vertical metrics")
    metrics.add_argument(
        "-a",
        "--ascent",
        type=float,
        default=config.DEFAULT_ASCENT_PERCENT,
        metavar="PERCENT",
        help="Ascent as percentage of em size (default: %(default)s)",
    )
    metrics.add_argument(
        "-d",
        "--descent",
        type=float,
        default=config.DEFAULT_DESCENT_PERCENT,
        metavar="PERCENT",
        help="Descent as percentage of em size, stored below the baseline "
        "(default: %(default)s)",
    )
    metrics.add_argument(
        "-l",
        "--line-gap",
        type=float,
        default=config.DEFAULT_LINE_GAP,
        metavar="UNITS",
        help="Line gap in font units (default: %(default)s)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List current metrics without modifying",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show detailed output. Use -v for VERBOSE, -vv for DEBUG level output",
    )
    return parser.parse_args(argv)


def parse_compress_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="compress-woff2",
        description="Compress TTF/OTF fonts to WOFF2 format",
    )
    parser.add_argument("input", help="Input font file path (TTF/OTF)")
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        help="Output WOFF2 file path (defaults to <input>.woff2)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show detailed output",
    )
    return parser.parse_args(argv)


def _report_failure(
    result: PipelineResult, action: str, verbosity: Verbosity
) -> None:
    error = result.error
    cs.StatusIndicator("error").add_message(f"{action}: {escape(str(error))}").emit(
        err_console
    )
    if verbosity >= Verbosity.VERBOSE:
        cs.emit(f"{cs.INDENT}[darktext]{error.kind}[/darktext]", console=err_console)
        err_console.print(
            Traceback.from_exception(type(error), error, error.__traceback__)
        )


def main(argv: Optional[List[str]] = None) -> int:
    start_time = time.time()
    args = parse_args(argv)
    verbosity = Verbosity.from_count(args.verbose)
    configure_logging(verbosity)

    if not args.list:
        validation.validate_args(args)

    metrics_config = MetricsConfig(
        ascent_percent=args.ascent,
        descent_percent=args.descent,
        line_gap=args.line_gap,
    )

    try:
        result = pipeline.run_pipeline(
            args.input,
            args.output,
            metrics_config,
            list_only=args.list,
            verbosity=verbosity,
            verify=verbosity >= Verbosity.VERBOSE,
        )
    except Exception as e:
        cs.StatusIndicator("error").add_message(
            f"Error processing font: {escape(str(e))}"
        ).emit(err_console)
        if verbosity >= Verbosity.VERBOSE:
            err_console.print_exception()
        return 1

    if not result.ok:
        _report_failure(result, "Error processing font", verbosity)
        return 1

    if result.list_only:
        return 0

    cs.emit("", console=console)
    cs.StatusIndicator("saved").add_message(
        f"Font saved to: {cs.fmt_file(result.output_path, filename_only=False)}"
    ).emit(console)

    if result.input_flavor is not None and args.output is None:
        reporting.report_format_note(result.output_path, console)

    reporting.report_css(result.output_path, console)

    if verbosity >= Verbosity.VERBOSE:
        cs.emit(
            f"{cs.INDENT}[darktext]Total time: [bold]{time.time() - start_time:.1f}"
            "[/bold]s[/darktext]",
            console=console,
        )
    return 0


def compress_main(argv: Optional[List[str]] = None) -> int:
    args = parse_compress_args(argv)
    verbosity = Verbosity.from_count(args.verbose)
    configure_logging(verbosity)

    try:
        result = pipeline.run_compressor(args.input, args.output, verbosity=verbosity)
    except Exception as e:
        cs.StatusIndicator("error").add_message(
            f"Error compressing font: {escape(str(e))}"
        ).emit(err_console)
        if verbosity >= Verbosity.VERBOSE:
            err_console.print_exception()
        return 1

    if not result.ok:
        _report_failure(result, "Error compressing font", verbosity)
        return 1

    reporting.report_compression(
        result.input_path,
        result.output_path,
        result.input_size,
        result.output_size,
        console,
    )
    if verbosity >= Verbosity.VERBOSE:
        cs.StatusIndicator("info").add_message(
            f"Saved to: {cs.fmt_file(result.output_path, filename_only=False)}"
        ).emit(console)
        reporting.report_css(
            result.output_path, console, font_display="swap", baked_metrics=False
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
