"""Font I/O helpers: load, serialize and inspect fonts with fontTools."""

import struct
from contextlib import contextmanager
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Union

from fontTools.ttLib import TTFont, TTLibError

from .errors import (
    ContainerMalformed,
    InputNotFound,
    SerializationFailed,
    TranscodeFailed,
)
from .models import MetricsSnapshot
from .planning import validate_upm

if TYPE_CHECKING:
    from fontTools.ttLib.tables._h_h_e_a import table__h_h_e_a


def read_font_bytes(path: Union[str, Path]) -> bytes:
    path = Path(path)
    if not path.is_file():
        raise InputNotFound(f"Input file not found: {path}")
    return path.read_bytes()


def write_font_bytes(path: Union[str, Path], data: bytes) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return str(path)


def load_font(data: bytes, lazy: Optional[bool] = None) -> TTFont:
    """Parse font bytes (SFNT, WOFF or WOFF2) into a TTFont.

    Bounding boxes and the timestamp are left alone so pass-through fields
    (hhea extents, head bbox) serialize exactly as they were read.
    """
    try:
        return TTFont(
            BytesIO(data),
            lazy=lazy,
            recalcBBoxes=False,
            recalcTimestamp=False,
        )
    except ImportError as e:
        # WOFF2 tables need brotli
        raise TranscodeFailed(f"Could not decode compressed font: {e}") from e
    except (TTLibError, AssertionError, EOFError, ValueError, struct.error) as e:
        raise ContainerMalformed(f"Could not parse font: {e}") from e


def serialize_font(font: TTFont) -> bytes:
    """Compile the font to uncompressed SFNT bytes, whatever its flavor was."""
    buffer = BytesIO()
    orig_flavor = font.flavor
    try:
        font.flavor = None
        font.save(buffer, reorderTables=True)
    except Exception as e:
        raise SerializationFailed(f"Failed to save font: {e}") from e
    finally:
        font.flavor = orig_flavor
    return buffer.getvalue()


@contextmanager
def table_errors(action: str) -> Iterator[None]:
    """Turn fontTools decompile failures inside the block into ContainerMalformed.

    Tables are decompiled on first access, so a truncated or inconsistent
    table only fails once its attributes are read or edited.
    """
    try:
        yield
    except (TTLibError, AssertionError, EOFError, ValueError, struct.error) as e:
        raise ContainerMalformed(f"Could not {action}: {e}") from e


def get_upm(font: TTFont) -> int:
    if "head" not in font:
        raise ContainerMalformed("Font has no head table (units per em unknown)")
    return validate_upm(getattr(font["head"], "unitsPerEm", None))


def get_family_name(font: TTFont) -> str:
    if "name" not in font:
        return "Unknown"
    return font["name"].getBestFamilyName() or "Unknown"


def read_snapshot(font: TTFont, path: str = "") -> MetricsSnapshot:
    """Collect the current OS/2 and hhea vertical metrics of ``font``."""
    upm = get_upm(font)
    snapshot = MetricsSnapshot(path, upm)
    snapshot.family_name = get_family_name(font)
    snapshot.flavor = font.flavor

    os2 = font["OS/2"] if "OS/2" in font else None
    hhea: Optional["table__h_h_e_a"] = font["hhea"] if "hhea" in font else None

    if os2 is not None:
        snapshot.has_os2 = True
        snapshot.os2_version = int(getattr(os2, "version", 0) or 0)
        snapshot.typo_ascender = int(getattr(os2, "sTypoAscender", 0) or 0)
        snapshot.typo_descender = int(getattr(os2, "sTypoDescender", 0) or 0)
        snapshot.typo_line_gap = int(getattr(os2, "sTypoLineGap", 0) or 0)
        snapshot.win_ascent = int(getattr(os2, "usWinAscent", 0) or 0)
        snapshot.win_descent = int(getattr(os2, "usWinDescent", 0) or 0)
        snapshot.fs_selection = int(getattr(os2, "fsSelection", 0) or 0)
    if hhea is not None:
        snapshot.has_hhea = True
        snapshot.hhea_ascent = int(getattr(hhea, "ascent", 0) or 0)
        snapshot.hhea_descent = int(getattr(hhea, "descent", 0) or 0)
        snapshot.hhea_line_gap = int(getattr(hhea, "lineGap", 0) or 0)
    return snapshot


def snapshot_from_bytes(data: bytes, path: str = "") -> MetricsSnapshot:
    """Snapshot read lazily, so only head/name/OS/2/hhea are decompiled.

    Works directly on WOFF/WOFF2 containers without reconstructing glyphs.
    """
    font = load_font(data, lazy=True)
    try:
        with table_errors("read metrics tables"):
            return read_snapshot(font, path)
    finally:
        font.close()
