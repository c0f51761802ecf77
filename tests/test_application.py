"""Tests for writing computed metrics into OS/2 and hhea"""

from vmetrics import application
from vmetrics.errors import MissingTable
from vmetrics.font_io import read_snapshot
from vmetrics.models import VerticalMetrics

METRICS = VerticalMetrics(900, -220, 0)


class TestUpdateOs2:
    """Typo metrics, Windows magnitudes and USE_TYPO_METRICS"""

    def test_fields_set(self, new_font):
        font = new_font()
        application.update_os2(font["OS/2"], METRICS)
        os2 = font["OS/2"]
        assert os2.sTypoAscender == 900
        assert os2.sTypoDescender == -220
        assert os2.sTypoLineGap == 0
        assert os2.usWinAscent == 900
        assert os2.usWinDescent == 220

    def test_use_typo_metrics_bit_set_and_other_bits_kept(self, new_font):
        font = new_font(fs_selection=0x40)
        application.update_os2(font["OS/2"], METRICS)
        assert font["OS/2"].fsSelection == 0xC0

    def test_bit_already_set(self):
        assert application.set_use_typo_metrics(0xC0) == 0xC0
        assert application.set_use_typo_metrics(0) == 0x80

    def test_bit_set_on_old_os2_version(self, new_font):
        font = new_font(os2_version=3, fs_selection=0)
        application.update_os2(font["OS/2"], METRICS)
        assert font["OS/2"].fsSelection & 0x80

    def test_changes_report_old_and_new(self, new_font):
        font = new_font(upm=1000)
        changes = application.update_os2(font["OS/2"], METRICS)
        assert changes["sTypoAscender"] == (750, 900)
        assert changes["usWinDescent"] == (300, 220)
        assert set(changes) == set(application.OS2_KEYS)


class TestReplaceHhea:
    """The hhea table object is rebuilt, not edited in place"""

    def test_table_object_replaced(self, new_font):
        font = new_font()
        original = font["hhea"]
        application.replace_hhea(font, METRICS)
        assert font["hhea"] is not original
        assert (font["hhea"].ascent, font["hhea"].descent, font["hhea"].lineGap) == (
            900,
            -220,
            0,
        )

    def test_pass_through_fields_copied(self, new_font):
        font = new_font()
        original = font["hhea"]
        original.advanceWidthMax = 612
        original.minLeftSideBearing = -7
        original.caretSlopeRise = 1
        original.caretSlopeRun = 0
        original.caretOffset = 3
        original.numberOfHMetrics = 2

        application.replace_hhea(font, METRICS)
        rebuilt = font["hhea"]
        assert rebuilt.advanceWidthMax == 612
        assert rebuilt.minLeftSideBearing == -7
        assert rebuilt.caretSlopeRise == 1
        assert rebuilt.caretOffset == 3
        assert rebuilt.numberOfHMetrics == 2
        assert rebuilt.metricDataFormat == 0

    def test_build_hhea_defaults_missing_attributes(self):
        class Bare:
            pass

        table = application.build_hhea(Bare(), METRICS)
        assert table.tableVersion == 0x00010000
        assert table.reserved0 == 0
        assert table.advanceWidthMax == 0
        assert table.ascent == 900


class TestApplyMetrics:
    """Both tables edited together, missing tables reported"""

    def test_both_tables_consistent(self, new_font):
        font = new_font(upm=2048)
        changes, issues = application.apply_metrics(font, VerticalMetrics(1843, -451, 0))
        assert issues == []
        assert read_snapshot(font).tables_consistent()
        assert "hhea.ascent" in application.changed_keys(changes)

    def test_missing_os2(self, new_font):
        font = new_font(include_os2=False)
        changes, issues = application.apply_metrics(font, METRICS)

        assert len(issues) == 1
        assert isinstance(issues[0], MissingTable)
        assert issues[0].tag == "OS/2"
        assert font["hhea"].ascent == 900
        assert not any(key in changes for key in application.OS2_KEYS)

    def test_missing_hhea(self, new_font):
        font = new_font()
        del font["hhea"]
        changes, issues = application.apply_metrics(font, METRICS)

        assert [issue.tag for issue in issues] == ["hhea"]
        assert font["OS/2"].sTypoAscender == 900
        assert "hhea" not in font
        assert not any(key in changes for key in application.HHEA_KEYS)

    def test_unchanged_when_already_applied(self, new_font):
        font = new_font()
        application.apply_metrics(font, METRICS)
        changes, _ = application.apply_metrics(font, METRICS)
        assert application.changed_keys(changes) == []
