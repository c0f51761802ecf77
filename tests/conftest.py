"""Shared fixtures: small fonts built with FontBuilder and raw SFNT buffers"""

import struct

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

FAMILY_NAME = "Metrics Test"


def _box_glyph(width, height):
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, height))
    pen.lineTo((width - 50, height))
    pen.lineTo((width - 50, 0))
    pen.closePath()
    return pen.glyph()


def build_font(upm=1000, os2_version=4, include_os2=True, fs_selection=0x40):
    """Build a two-glyph TrueType font in memory."""
    fb = FontBuilder(upm, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A"])
    fb.setupCharacterMap({0x41: "A"})
    fb.setupGlyf(
        {
            ".notdef": TTGlyphPen(None).glyph(),
            "A": _box_glyph(upm // 2, int(upm * 0.7)),
        }
    )
    fb.setupHorizontalMetrics({".notdef": (upm // 2, 0), "A": (upm // 2, 50)})
    fb.setupHorizontalHeader(
        ascent=int(upm * 0.8), descent=-int(upm * 0.2), lineGap=int(upm * 0.05)
    )
    fb.setupNameTable({"familyName": FAMILY_NAME, "styleName": "Regular"})
    if include_os2:
        fb.setupOS2(
            version=os2_version,
            sTypoAscender=int(upm * 0.75),
            sTypoDescender=-int(upm * 0.25),
            sTypoLineGap=0,
            usWinAscent=int(upm * 0.95),
            usWinDescent=int(upm * 0.3),
            fsSelection=fs_selection,
        )
    fb.setupPost()
    return fb.font


@pytest.fixture
def make_font(tmp_path):
    """Factory writing a test font to ``tmp_path`` and returning its path.

    ``flavor`` of "woff" or "woff2" saves a compressed container.
    """

    def _make(name="Test.ttf", flavor=None, **kwargs):
        font = build_font(**kwargs)
        font.flavor = flavor
        path = tmp_path / name
        font.save(str(path))
        font.close()
        return path

    return _make


def _hhea_table(ascent=800, descent=-200, line_gap=0, length=36):
    data = struct.pack(">Lhhh", 0x00010000, ascent, descent, line_gap)
    return (data + b"\0" * length)[:length]


def _head_table():
    # version, fontRevision, checkSumAdjustment, magicNumber, then zeros
    data = struct.pack(">LLLL", 0x00010000, 0x00010000, 0, 0x5F0F3CF5)
    return data + b"\0" * (54 - len(data))


def _pack_sfnt(tables, version=b"\x00\x01\x00\x00"):
    """Lay out ``tables`` (tag, bytes) after a directory, 4-byte aligned."""
    num_tables = len(tables)
    header = struct.pack(">4sHHHH", version, num_tables, 0, 0, 0)
    offset = 12 + 16 * num_tables
    directory = b""
    body = b""
    for tag, data in tables:
        directory += struct.pack(">4sLLL", tag.encode("latin-1"), 0, offset, len(data))
        padded = data + b"\0" * (-len(data) % 4)
        body += padded
        offset += len(padded)
    return header + directory + body


@pytest.fixture
def sfnt_bytes():
    """Factory for hand-made SFNT buffers.

    Defaults to a ``head`` + ``hhea`` font; pass ``tables`` as a list of
    (tag, bytes) to control the directory exactly.
    """

    def _make(tables=None, hhea_length=36, version=b"\x00\x01\x00\x00"):
        if tables is None:
            tables = [
                ("head", _head_table()),
                ("hhea", _hhea_table(length=hhea_length)),
                ("maxp", struct.pack(">LH", 0x00005000, 2)),
            ]
        return _pack_sfnt(tables, version)

    return _make


@pytest.fixture
def hhea_table():
    return _hhea_table


@pytest.fixture
def new_font():
    """Factory returning an in-memory TTFont (caller closes it)."""
    return build_font
