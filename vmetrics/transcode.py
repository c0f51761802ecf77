"""WOFF2/WOFF <-> SFNT transcoding via fontTools.

The codec is used as a black box: bytes in, bytes out. Any failure inside it
surfaces as TranscodeFailed carrying the codec's message.
"""

from io import BytesIO
from typing import Optional

from fontTools.ttLib import TTFont
from fontTools.ttLib import woff2

from . import sfnt
from .errors import TranscodeFailed, UnsupportedFormat
from .logging_config import get_logger

logger = get_logger(__name__)

FLAVOR_WOFF = "woff"
FLAVOR_WOFF2 = "woff2"


def sniff_flavor(data: bytes) -> Optional[str]:
    """Return "woff2", "woff", or None for an uncompressed SFNT."""
    signature = bytes(data[:4])
    if signature in sfnt.COMPRESSED_SIGNATURES:
        return sfnt.COMPRESSED_SIGNATURES[signature]
    if sfnt.is_sfnt(data):
        return None
    raise UnsupportedFormat(
        f"Unsupported font data (signature {signature!r}); "
        "expected TTF, OTF, WOFF or WOFF2"
    )


def _resave(data: bytes, flavor: Optional[str]) -> bytes:
    source = BytesIO(data)
    target = BytesIO()
    font = TTFont(source, recalcBBoxes=False, recalcTimestamp=False)
    try:
        font.flavor = flavor
        font.flavorData = None
        font.save(target, reorderTables=flavor is None)
    finally:
        font.close()
    return target.getvalue()


def decompress(data: bytes) -> bytes:
    """Decompress a WOFF2 container to SFNT bytes."""
    if sniff_flavor(data) != FLAVOR_WOFF2:
        raise UnsupportedFormat("Input is not a WOFF2 font")
    source = BytesIO(data)
    target = BytesIO()
    try:
        woff2.decompress(source, target)
    except Exception as e:
        raise TranscodeFailed(f"WOFF2 decompression failed: {e}") from e
    result = target.getvalue()
    logger.debug("Decompressed WOFF2 to SFNT: %d -> %d bytes", len(data), len(result))
    return result


def compress(data: bytes, flavor: str = FLAVOR_WOFF2) -> bytes:
    """Compress SFNT bytes to WOFF2 (default) or WOFF."""
    if sniff_flavor(data) is not None:
        raise UnsupportedFormat("Input is already compressed; expected TTF or OTF")
    try:
        if flavor == FLAVOR_WOFF2:
            source = BytesIO(data)
            target = BytesIO()
            woff2.compress(source, target)
            result = target.getvalue()
        elif flavor == FLAVOR_WOFF:
            result = _resave(data, FLAVOR_WOFF)
        else:
            raise UnsupportedFormat(f"Unsupported compression flavor: {flavor}")
    except UnsupportedFormat:
        raise
    except Exception as e:
        raise TranscodeFailed(f"{flavor.upper()} compression failed: {e}") from e
    logger.debug("Compressed SFNT to %s: %d -> %d bytes", flavor, len(data), len(result))
    return result


def unwrap(data: bytes) -> bytes:
    """Return uncompressed SFNT bytes for any supported input."""
    flavor = sniff_flavor(data)
    if flavor is None:
        return bytes(data)
    if flavor == FLAVOR_WOFF2:
        return decompress(data)
    try:
        result = _resave(data, None)
    except Exception as e:
        raise TranscodeFailed(f"WOFF decompression failed: {e}") from e
    logger.debug("Decompressed WOFF to SFNT: %d -> %d bytes", len(data), len(result))
    return result

