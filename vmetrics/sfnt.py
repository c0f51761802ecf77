"""Raw SFNT table-directory access and checksum maintenance.

All knowledge of the container's byte layout lives here: the 12-byte offset
table, the 16-byte directory records, and the head table's
checkSumAdjustment slot.
"""

import struct
from typing import List, NamedTuple, Optional, Union

from fontTools.ttLib.sfnt import calcChecksum

from .errors import ContainerMalformed

# Offset table: sfntVersion, numTables, searchRange, entrySelector, rangeShift
SFNT_HEADER = struct.Struct(">4sHHHH")
SFNT_HEADER_SIZE = SFNT_HEADER.size  # 12
# Directory record: tag, checkSum, offset, length
DIRECTORY_ENTRY = struct.Struct(">4sLLL")
DIRECTORY_ENTRY_SIZE = DIRECTORY_ENTRY.size  # 16
CHECKSUM_FIELD_OFFSET = 4  # within a directory record

HEAD_TAG = "head"
HEAD_CHECKSUM_ADJUSTMENT_OFFSET = 8
CHECKSUM_MAGIC = 0xB1B0AFBA

SFNT_VERSIONS = (b"\x00\x01\x00\x00", b"OTTO", b"true", b"typ1")
COMPRESSED_SIGNATURES = {b"wOFF": "woff", b"wOF2": "woff2"}


class DirectoryEntry(NamedTuple):
    tag: str
    checksum: int
    offset: int
    length: int
    record_offset: int  # where this record sits inside the directory


def _tag_bytes(tag: Union[str, bytes]) -> bytes:
    raw = tag.encode("latin-1") if isinstance(tag, str) else bytes(tag)
    if len(raw) != 4:
        raise ValueError(f"Table tag must be 4 bytes, got {tag!r}")
    return raw


def read_header(data: bytes):
    """Return (sfnt_version, num_tables) after checking the directory fits."""
    if len(data) < SFNT_HEADER_SIZE:
        raise ContainerMalformed(
            f"Container malformed: {len(data)} bytes is shorter than the "
            f"{SFNT_HEADER_SIZE}-byte SFNT header"
        )
    version, num_tables, _, _, _ = SFNT_HEADER.unpack_from(data, 0)
    if version in COMPRESSED_SIGNATURES:
        raise ContainerMalformed(
            f"Container malformed: {COMPRESSED_SIGNATURES[version].upper()} "
            "container must be decompressed before table access"
        )
    directory_end = SFNT_HEADER_SIZE + num_tables * DIRECTORY_ENTRY_SIZE
    if directory_end > len(data):
        raise ContainerMalformed(
            f"Container malformed: table directory declares {num_tables} tables "
            f"({directory_end} bytes) but buffer holds {len(data)} bytes"
        )
    return version, num_tables


def _entry_at(data: bytes, index: int) -> DirectoryEntry:
    record_offset = SFNT_HEADER_SIZE + index * DIRECTORY_ENTRY_SIZE
    tag, checksum, offset, length = DIRECTORY_ENTRY.unpack_from(data, record_offset)
    return DirectoryEntry(
        tag.decode("latin-1"), checksum, offset, length, record_offset
    )


def _check_bounds(data: bytes, entry: DirectoryEntry) -> DirectoryEntry:
    if entry.offset + entry.length > len(data):
        raise ContainerMalformed(
            f"Container malformed: table '{entry.tag}' at offset {entry.offset} "
            f"with length {entry.length} runs past the end of the buffer "
            f"({len(data)} bytes)"
        )
    return entry


def read_directory(data: bytes) -> List[DirectoryEntry]:
    """Parse every directory record, checking each table lies inside the buffer."""
    _, num_tables = read_header(data)
    return [_check_bounds(data, _entry_at(data, i)) for i in range(num_tables)]


def find_table(data: bytes, tag: Union[str, bytes]) -> Optional[DirectoryEntry]:
    """Scan the directory for ``tag``; first match wins, None when absent."""
    wanted = _tag_bytes(tag)
    _, num_tables = read_header(data)
    for index in range(num_tables):
        record_offset = SFNT_HEADER_SIZE + index * DIRECTORY_ENTRY_SIZE
        if data[record_offset : record_offset + 4] == wanted:
            return _check_bounds(data, _entry_at(data, index))
    return None


def find_table_offset(data: bytes, tag: Union[str, bytes]) -> Optional[int]:
    """Byte offset in ``data`` where the table's content begins, or None."""
    entry = find_table(data, tag)
    return entry.offset if entry is not None else None


def recalc_checksums(data: bytes) -> bytes:
    """Rewrite every directory checksum and head.checkSumAdjustment.

    The head table is checksummed with checkSumAdjustment zeroed, then the
    adjustment is set so the whole font sums to CHECKSUM_MAGIC.
    """
    buf = bytearray(data)
    entries = read_directory(buf)

    head = next((entry for entry in entries if entry.tag == HEAD_TAG), None)
    if head is not None:
        if head.length < HEAD_CHECKSUM_ADJUSTMENT_OFFSET + 4:
            raise ContainerMalformed(
                f"Container malformed: head table is only {head.length} bytes"
            )
        struct.pack_into(">L", buf, head.offset + HEAD_CHECKSUM_ADJUSTMENT_OFFSET, 0)

    for entry in entries:
        table = bytes(buf[entry.offset : entry.offset + entry.length])
        checksum = calcChecksum(table)
        struct.pack_into(
            ">L", buf, entry.record_offset + CHECKSUM_FIELD_OFFSET, checksum
        )

    if head is not None:
        adjustment = (CHECKSUM_MAGIC - calcChecksum(bytes(buf))) & 0xFFFFFFFF
        struct.pack_into(
            ">L", buf, head.offset + HEAD_CHECKSUM_ADJUSTMENT_OFFSET, adjustment
        )
    return bytes(buf)


def is_sfnt(data: bytes) -> bool:
    return len(data) >= 4 and bytes(data[:4]) in SFNT_VERSIONS
