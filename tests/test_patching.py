"""Tests for the direct hhea byte patch"""

from io import BytesIO

import pytest
from fontTools.ttLib import TTFont
from fontTools.ttLib.sfnt import calcChecksum

from vmetrics import font_io, sfnt
from vmetrics.errors import ContainerMalformed, MetricOutOfRange, PatchTargetNotFound
from vmetrics.models import VerticalMetrics
from vmetrics.patching import (
    HHEA_METRICS_OFFSET,
    PatchResult,
    patch_hhea,
    read_hhea_metrics,
)

METRICS = VerticalMetrics(900, -220, 0)


class TestPatchHhea:
    """Patching hand-made buffers"""

    def test_writes_three_fields(self, sfnt_bytes):
        data = sfnt_bytes()
        result = patch_hhea(data, METRICS)
        entry = sfnt.find_table(data, "hhea")

        assert result.patched
        assert result.issues == []
        assert result.offset == entry.offset
        assert read_hhea_metrics(result.data) == METRICS
        assert len(result.data) == len(data)

    def test_field_offsets(self, sfnt_bytes):
        data = sfnt_bytes()
        result = patch_hhea(data, METRICS)
        base = result.offset + HHEA_METRICS_OFFSET
        assert result.field_offsets() == {
            "ascender": base,
            "descender": base + 2,
            "lineGap": base + 4,
        }

    def test_other_tables_untouched(self, sfnt_bytes):
        data = sfnt_bytes()
        result = patch_hhea(data, METRICS, recalc_checksums=False)
        entry = sfnt.find_table(data, "hhea")
        start = entry.offset + HHEA_METRICS_OFFSET
        assert result.data[:start] == data[:start]
        assert result.data[start + 6 :] == data[start + 6 :]

    def test_idempotent(self, sfnt_bytes):
        once = patch_hhea(sfnt_bytes(), METRICS).data
        twice = patch_hhea(once, METRICS).data
        assert once == twice

    def test_checksums_recalculated(self, sfnt_bytes):
        result = patch_hhea(sfnt_bytes(), METRICS)
        hhea = sfnt.find_table(result.data, "hhea")
        table = result.data[hhea.offset : hhea.offset + hhea.length]
        assert calcChecksum(table) == hhea.checksum
        assert calcChecksum(result.data) == sfnt.CHECKSUM_MAGIC

    def test_checksums_left_alone_when_disabled(self, sfnt_bytes):
        data = sfnt_bytes()
        result = patch_hhea(data, METRICS, recalc_checksums=False)
        assert sfnt.find_table(result.data, "hhea").checksum == 0

    def test_missing_hhea_returns_input_unchanged(self, sfnt_bytes):
        data = sfnt_bytes(tables=[("maxp", b"\x00\x00\x50\x00\x00\x02")])
        result = patch_hhea(data, METRICS)

        assert not result.patched
        assert result.data == data
        assert result.offset is None
        assert result.field_offsets() is None
        assert len(result.issues) == 1
        assert isinstance(result.issues[0], PatchTargetNotFound)
        assert not result.issues[0].fatal

    def test_short_hhea_table(self, sfnt_bytes):
        data = sfnt_bytes(hhea_length=6)
        result = patch_hhea(data, METRICS)
        assert not result.patched
        assert result.data == data
        assert isinstance(result.issues[0], ContainerMalformed)

    def test_truncated_directory_is_an_issue(self, sfnt_bytes):
        data = sfnt_bytes()[:30]
        result = patch_hhea(data, METRICS)
        assert not result.patched
        assert result.data == data
        assert isinstance(result.issues[0], ContainerMalformed)

    def test_out_of_range_raises_before_touching_bytes(self, sfnt_bytes):
        with pytest.raises(MetricOutOfRange):
            patch_hhea(sfnt_bytes(), VerticalMetrics(40000, -220, 0))

    def test_patch_result_defaults(self):
        result = PatchResult(b"abc")
        assert not result.patched
        assert result.issues == []


class TestPatchSerializedFont:
    """Patching bytes that fontTools produced"""

    def test_patched_font_loads_with_strict_checksums(self, new_font):
        font = new_font(upm=2048)
        data = font_io.serialize_font(font)
        font.close()

        result = patch_hhea(data, VerticalMetrics(1843, -451, 0))

        reloaded = TTFont(BytesIO(result.data), checkChecksums=2)
        hhea = reloaded["hhea"]
        assert (hhea.ascent, hhea.descent, hhea.lineGap) == (1843, -451, 0)
        assert reloaded["head"].unitsPerEm == 2048
        reloaded.close()

    def test_read_hhea_metrics_matches_object_model(self, new_font):
        font = new_font(upm=1000)
        data = font_io.serialize_font(font)
        expected = VerticalMetrics(
            font["hhea"].ascent, font["hhea"].descent, font["hhea"].lineGap
        )
        font.close()
        assert read_hhea_metrics(data) == expected
