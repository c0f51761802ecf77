"""Tests for the font-metrics and compress-woff2 entry points"""

import pytest
from fontTools.ttLib import TTFont

from vmetrics import cli


def _flat(text):
    return " ".join(text.split())


class TestParseArgs:
    def test_defaults(self):
        args = cli.parse_args(["Font.ttf"])
        assert (args.ascent, args.descent, args.line_gap) == (90.0, 22.0, 0.0)
        assert args.output is None
        assert not args.list
        assert args.verbose == 0

    def test_short_flags(self):
        args = cli.parse_args(
            ["Font.ttf", "-a", "80", "-d", "20", "-l", "10", "-o", "x.woff2", "-vv"]
        )
        assert (args.ascent, args.descent, args.line_gap) == (80.0, 20.0, 10.0)
        assert args.output == "x.woff2"
        assert args.verbose == 2

    def test_missing_input_is_usage_error(self):
        with pytest.raises(SystemExit):
            cli.parse_args([])


class TestMain:
    def test_success(self, make_font, tmp_path, capsys):
        path = make_font(upm=2048)
        assert cli.main([str(path)]) == 0

        out = _flat(capsys.readouterr().out)
        assert "Font saved to:" in out
        assert "format('truetype')" in out

        font = TTFont(str(tmp_path / "Test-fixed.ttf"))
        assert font["hhea"].ascent == 1843
        assert font["OS/2"].sTypoDescender == -451
        font.close()

    def test_list_writes_nothing(self, make_font, tmp_path, capsys):
        path = make_font()
        assert cli.main([str(path), "--list"]) == 0
        assert sorted(p.name for p in tmp_path.iterdir()) == ["Test.ttf"]
        assert "Current metrics" in capsys.readouterr().out

    def test_out_of_range_exits_nonzero(self, make_font, tmp_path, capsys):
        path = make_font()
        assert cli.main([str(path), "-a", "5000"]) == 1
        assert sorted(p.name for p in tmp_path.iterdir()) == ["Test.ttf"]
        assert "ERROR" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / "missing.ttf")]) == 1
        assert "not found" in _flat(capsys.readouterr().err)

    def test_verbose_failure_shows_kind(self, make_font, capsys):
        path = make_font()
        assert cli.main([str(path), "-a", "5000", "-v"]) == 1
        assert "MetricOutOfRange" in capsys.readouterr().err

    def test_compressed_input_note(self, make_font, capsys):
        path = make_font("Test.woff", flavor="woff")
        assert cli.main([str(path)]) == 0
        assert "compress-woff2" in _flat(capsys.readouterr().out)

    def test_verbose_success(self, make_font, capsys):
        assert cli.main([str(make_font()), "-v"]) == 0
        out = _flat(capsys.readouterr().out)
        assert "Verified metrics:" in out
        assert "Total time:" in out


class TestCompressMain:
    def test_rejects_woff2_input(self, make_font, tmp_path, capsys):
        path = make_font("Test.woff", flavor="woff")
        woff2_path = tmp_path / "Test.woff2"
        path.rename(woff2_path)
        original = woff2_path.read_bytes()

        assert cli.compress_main([str(woff2_path)]) == 1

        assert sorted(p.name for p in tmp_path.iterdir()) == ["Test.woff2"]
        assert woff2_path.read_bytes() == original
        assert "Unsupported input format" in _flat(capsys.readouterr().err)

    def test_missing_file(self, tmp_path):
        assert cli.compress_main([str(tmp_path / "missing.ttf")]) == 1

    def test_compresses(self, make_font, tmp_path, capsys):
        pytest.importorskip("brotli")
        path = make_font()
        assert cli.compress_main([str(path), "-v"]) == 0
        assert (tmp_path / "Test.woff2").read_bytes()[:4] == b"wOF2"
        out = _flat(capsys.readouterr().out)
        assert "smaller" in out
        assert "font-display: swap;" in out
