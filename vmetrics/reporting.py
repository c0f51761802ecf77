"""Reporting functions: current metrics, applied changes, CSS usage snippets."""

from pathlib import Path
from typing import Iterable, Optional, Union

from rich.console import Console
from rich.markup import escape

from . import config
from . import console_styles as cs
from .application import HHEA_KEYS, OS2_KEYS, Changes, changed_keys
from .errors import FontMetricsError
from .models import MetricsSnapshot, VerticalMetrics
from .patching import PatchResult
from .planning import span_percent


def report_snapshot(
    snapshot: MetricsSnapshot,
    console: Optional[Console] = None,
    title: str = "Current metrics:",
) -> None:
    kind = f"{snapshot.flavor.upper()} font" if snapshot.flavor else "font"
    indicator = (
        cs.StatusIndicator("info")
        .add_message(
            f"Loaded {kind}: {cs.fmt_file(snapshot.path, filename_only=False)}"
        )
        .add_item(f"Font family: {escape(snapshot.family_name)}", indent_level=0)
        .add_item(f"Units per em: {snapshot.upm}", indent_level=0)
        .add_item(f"[bold]{title}[/bold]", indent_level=0)
    )
    if snapshot.has_os2:
        bit7 = "set" if snapshot.use_typo_metrics else "clear"
        indicator.add_item(f"OS/2 Ascender: {snapshot.typo_ascender}")
        indicator.add_item(f"OS/2 Descender: {snapshot.typo_descender}")
        indicator.add_item(f"OS/2 Line Gap: {snapshot.typo_line_gap}")
        indicator.add_item(f"Win Ascent: {snapshot.win_ascent}")
        indicator.add_item(f"Win Descent: {snapshot.win_descent}")
        indicator.add_item(f"fsSelection (USE_TYPO_METRICS): {bit7}")
    else:
        indicator.add_item("[dim]OS/2 table: not present[/dim]")
    if snapshot.has_hhea:
        indicator.add_item(f"hhea Ascent: {snapshot.hhea_ascent}")
        indicator.add_item(f"hhea Descent: {snapshot.hhea_descent}")
        indicator.add_item(f"hhea Line Gap: {snapshot.hhea_line_gap}")
    else:
        indicator.add_item("[dim]hhea table: not present[/dim]")
    if snapshot.has_os2 and snapshot.has_hhea:
        agree = "yes" if snapshot.tables_consistent() else "no"
        indicator.add_item(f"OS/2 and hhea agree: {agree}", indent_level=0)
    cs.emit("", console=console)
    indicator.emit(console)


def report_new_metrics(
    metrics: VerticalMetrics,
    metrics_config: config.MetricsConfig,
    upm: int,
    console: Optional[Console] = None,
) -> None:
    cs.StatusIndicator("info").add_message("New metrics to apply:").add_item(
        f"Ascent: {metrics.ascent} ({metrics_config.ascent_percent}% of {upm})"
    ).add_item(
        f"Descent: {metrics.descent} ({abs(metrics_config.descent_percent)}% of {upm})"
    ).add_item(
        f"Line Gap: {metrics.line_gap}"
    ).add_item(
        f"Total span: {span_percent(metrics, upm):.1f}% of em"
    ).emit(console)


def report_changes(
    path: str, changes: Changes, console: Optional[Console] = None
) -> None:
    """Grouped OS/2 / hhea old → new listing of the fields that changed."""
    diff_keys = changed_keys(changes)
    if not diff_keys:
        cs.StatusIndicator("unchanged").add_file(path, filename_only=False).add_message(
            "(metrics already match)"
        ).emit(console)
        return

    indicator = cs.StatusIndicator("updated").add_file(path, filename_only=False)

    os2_keys = [k for k in diff_keys if k in OS2_KEYS]
    if os2_keys:
        indicator.add_item("[bold]OS/2 table:[/bold]", indent_level=0)
        for k in os2_keys:
            old_v, new_v = changes[k]
            if k == "fsSelection":
                bit = 1 << config.USE_TYPO_METRICS_BIT
                old_bit7 = "set" if old_v & bit else "clear"
                new_bit7 = "set" if new_v & bit else "clear"
                indicator.add_item(
                    f"fsSelection (USE_TYPO_METRICS): {old_bit7} → {new_bit7}",
                    indent_level=1,
                )
            else:
                indicator.add_item(
                    f"{k}: {cs.fmt_change(str(old_v), str(new_v))}", indent_level=1
                )

    hhea_keys = [k for k in diff_keys if k in HHEA_KEYS]
    if hhea_keys:
        indicator.add_item("[bold]hhea table:[/bold]", indent_level=0)
        for k in hhea_keys:
            old_v, new_v = changes[k]
            short_name = k.replace("hhea.", "")
            indicator.add_item(
                f"{short_name}: {cs.fmt_change(str(old_v), str(new_v))}",
                indent_level=1,
            )
    indicator.emit(console)


def report_patch(
    patch: PatchResult, metrics: VerticalMetrics, console: Optional[Console] = None
) -> None:
    offsets = patch.field_offsets()
    if not patch.patched or offsets is None:
        return
    cs.StatusIndicator("info").add_message(
        f"Binary patched hhea table at offset 0x{patch.offset:x}"
    ).add_item(f"Ascent: {metrics.ascent} at offset 0x{offsets['ascender']:x}").add_item(
        f"Descent: {metrics.descent} at offset 0x{offsets['descender']:x}"
    ).add_item(
        f"LineGap: {metrics.line_gap} at offset 0x{offsets['lineGap']:x}"
    ).emit(console)


def report_issues(
    issues: Iterable[FontMetricsError], console: Optional[Console] = None
) -> None:
    for issue in issues:
        cs.StatusIndicator("warning").add_message(escape(str(issue))).add_item(
            f"[dim]{issue.kind}[/dim]"
        ).emit(console)


def css_format(ext: str) -> str:
    """CSS ``format()`` keyword for a file extension (with or without the dot)."""
    ext = ext.lstrip(".").lower()
    return config.CSS_FORMATS.get(ext, ext)


def css_snippet(
    output_path: Union[str, Path],
    font_display: Optional[str] = None,
    baked_metrics: bool = True,
) -> str:
    path = Path(output_path)
    lines = [
        "@font-face {",
        f"  font-family: '{path.stem}';",
        f"  src: url('{path.name}') format('{css_format(path.suffix)}');",
        "  font-weight: normal;",
        "  font-style: normal;",
    ]
    if font_display:
        lines.append(f"  font-display: {font_display};")
    if baked_metrics:
        lines.append("  /* Metrics are baked into the font file: */")
        lines.append("  /* no ascent-override or descent-override needed */")
    lines.append("}")
    return "\n".join(lines)


def report_css(
    output_path: Union[str, Path],
    console: Optional[Console] = None,
    font_display: Optional[str] = None,
    baked_metrics: bool = True,
) -> None:
    cs.emit("", console=console)
    cs.StatusIndicator("info").add_message("CSS usage:").emit(console)
    # print without markup so braces and brackets survive as-is
    (console or cs.get_console()).print(
        css_snippet(output_path, font_display, baked_metrics), markup=False
    )


def compression_ratio(input_size: int, output_size: int) -> float:
    if input_size <= 0:
        return 0.0
    return (1 - output_size / float(input_size)) * 100


def report_compression(
    input_path: str,
    output_path: str,
    input_size: int,
    output_size: int,
    console: Optional[Console] = None,
) -> None:
    ratio = compression_ratio(input_size, output_size)
    cs.StatusIndicator("saved").add_message(
        f"Compressed {cs.fmt_file(input_path)} to {cs.fmt_file(output_path)}"
    ).add_item(
        f"Size: {cs.fmt_bytes(input_size)} → {cs.fmt_bytes(output_size)} "
        f"({ratio:.1f}% smaller)"
    ).emit(console)


def report_format_note(output_path: str, console: Optional[Console] = None) -> None:
    cs.StatusIndicator("info").add_message(
        "Compressed input converted to uncompressed output"
    ).add_item(
        f"To convert back to WOFF2, use: compress-woff2 {Path(output_path).name}"
    ).emit(console)
