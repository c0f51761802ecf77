"""Direct byte patch of the hhea table in a serialized font.

The structured hhea edit goes through the font object model; this writes the
three metric fields straight into the already-serialized bytes so the result
does not depend on how the serializer treated the table.
"""

import struct
from typing import List, Optional

from . import planning
from . import sfnt
from .errors import ContainerMalformed, FontMetricsError, PatchTargetNotFound
from .models import VerticalMetrics

HHEA_TAG = "hhea"
# hhea layout: version (4 bytes), then ascender, descender, lineGap as int16
HHEA_METRICS_OFFSET = 4
HHEA_METRICS = struct.Struct(">hhh")
HHEA_MIN_LENGTH = HHEA_METRICS_OFFSET + HHEA_METRICS.size


class PatchResult:
    def __init__(self, data: bytes, offset: Optional[int] = None):
        self.data = data
        self.offset = offset  # start of the hhea table content, when found
        self.patched: bool = False
        self.issues: List[FontMetricsError] = []

    def field_offsets(self) -> Optional[dict]:
        if self.offset is None:
            return None
        base = self.offset + HHEA_METRICS_OFFSET
        return {"ascender": base, "descender": base + 2, "lineGap": base + 4}


def patch_hhea(
    data: bytes,
    metrics: VerticalMetrics,
    *,
    recalc_checksums: bool = True,
) -> PatchResult:
    """Overwrite hhea ascender/descender/lineGap at fixed offsets.

    Returns the input unchanged with a PatchTargetNotFound issue when the
    directory has no hhea entry, or a ContainerMalformed issue when the
    directory cannot be read. Values outside int16 raise MetricOutOfRange.
    """
    for name, value in (
        ("ascent", metrics.ascent),
        ("descent", metrics.descent),
        ("line gap", metrics.line_gap),
    ):
        planning.ensure_int16(name, value)

    result = PatchResult(bytes(data))
    try:
        entry = sfnt.find_table(data, HHEA_TAG)
    except ContainerMalformed as e:
        result.issues.append(e)
        return result

    if entry is None:
        result.issues.append(
            PatchTargetNotFound("Could not find hhea table for binary patching")
        )
        return result

    result.offset = entry.offset
    if entry.length < HHEA_MIN_LENGTH:
        result.issues.append(
            ContainerMalformed(
                f"hhea table is only {entry.length} bytes, "
                f"need {HHEA_MIN_LENGTH} to patch metrics"
            )
        )
        return result

    buf = bytearray(data)
    HHEA_METRICS.pack_into(
        buf,
        entry.offset + HHEA_METRICS_OFFSET,
        metrics.ascent,
        metrics.descent,
        metrics.line_gap,
    )
    patched = bytes(buf)

    if recalc_checksums:
        try:
            patched = sfnt.recalc_checksums(patched)
        except ContainerMalformed as e:
            # Field write stands; only the checksums could not be refreshed
            result.issues.append(e)

    result.data = patched
    result.patched = True
    return result


def read_hhea_metrics(data: bytes) -> Optional[VerticalMetrics]:
    """Read hhea ascender/descender/lineGap straight from serialized bytes."""
    entry = sfnt.find_table(data, HHEA_TAG)
    if entry is None or entry.length < HHEA_MIN_LENGTH:
        return None
    ascent, descent, line_gap = HHEA_METRICS.unpack_from(
        data, entry.offset + HHEA_METRICS_OFFSET
    )
    return VerticalMetrics(ascent, descent, line_gap)
