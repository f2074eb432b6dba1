"""
BSP Reader — decode a compiled Source Engine VBSP file into typed lumps.

Decoding runs in three steps over one immutable buffer:
  1. Load the whole file (byte_buffer.load_file)
  2. Decode and validate the 1036-byte header (magic, version, lump directory)
  3. Decode each supported lump: bounds check, element count, count vs. the
     format maximum, then field-by-field record decoding in file order

The first failure aborts the decode; no partial DecodedMap is returned.

Header layout (little-endian):
    uint32 ident                      — 'VBSP'
    int32  version
    lump_t lumps[64]                  — int32 fileofs, filelen, version; char fourCC[4]
    int32  mapRevision
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import Tuple, Union

from .bsp_types import (
    HEADER_LUMPS,
    HEADER_SIZE,
    IDBSPHEADER,
    LUMP_FIELDS,
    LUMP_MAXIMUMS,
    DecodedMap,
    FileHeader,
    LumpDirectoryEntry,
    LumpKind,
)
from .byte_buffer import ByteBuffer, load_file
from .errors import (
    BadMagicError,
    LumpExceedsMaximumError,
    LumpOutOfBoundsError,
    TruncatedHeaderError,
)
from .lump_layouts import select_layout

_HEADER_START = struct.Struct('<Ii')
_LUMP_ENTRY = struct.Struct('<iii4s')
_MAP_REVISION = struct.Struct('<i')

# Fixed-record lumps in the order they are decoded (and reported)
RECORD_LUMPS: Tuple[LumpKind, ...] = (
    LumpKind.PLANES,
    LumpKind.TEXDATA,
    LumpKind.VERTEXES,
    LumpKind.NODES,
    LumpKind.FACES,
    LumpKind.LEAFS,
    LumpKind.EDGES,
    LumpKind.SURFEDGES,
)


# ─── Header ───────────────────────────────────────────────────────────────────

def read_header(buffer: ByteBuffer) -> FileHeader:
    """Decode the fixed-size file header.

    Raises:
        TruncatedHeaderError: buffer shorter than HEADER_SIZE
        BadMagicError: identifier is not 'VBSP'
    """
    if len(buffer) < HEADER_SIZE:
        raise TruncatedHeaderError(len(buffer), HEADER_SIZE)

    data = buffer.view(0, HEADER_SIZE)
    ident, version = _HEADER_START.unpack_from(data, 0)
    if ident != IDBSPHEADER:
        raise BadMagicError(ident, IDBSPHEADER)

    # Lump directory (64 lumps × 16 bytes each, starting at offset 8)
    lumps = []
    for i in range(HEADER_LUMPS):
        fileofs, filelen, lump_ver, fourcc = _LUMP_ENTRY.unpack_from(
            data, _HEADER_START.size + i * _LUMP_ENTRY.size)
        lumps.append(LumpDirectoryEntry(fileofs, filelen, lump_ver, fourcc))

    map_revision, = _MAP_REVISION.unpack_from(data, HEADER_SIZE - 4)
    return FileHeader(
        identifier=ident,
        format_version=version,
        lumps=tuple(lumps),
        map_revision=map_revision,
    )


# ─── Lumps ────────────────────────────────────────────────────────────────────

def _get_lump_data(buffer: ByteBuffer, header: FileHeader,
                   lump_index: int) -> memoryview:
    """Bounds-checked raw bytes for a lump."""
    lump = header.lump(lump_index)
    if not buffer.contains(lump.file_offset, lump.byte_length):
        raise LumpOutOfBoundsError(int(lump_index), lump.file_offset,
                                   lump.byte_length, len(buffer))
    return buffer.view(lump.file_offset, lump.byte_length)


def decode_entities(buffer: ByteBuffer, header: FileHeader) -> bytes:
    """Copy the entity lump verbatim. Key/value parsing is left to callers."""
    return bytes(_get_lump_data(buffer, header, LumpKind.ENTITIES))


def decode_lump(buffer: ByteBuffer, header: FileHeader,
                kind: LumpKind) -> tuple:
    """Decode a fixed-record lump into a tuple of records, in file order.

    The element count is filelen // record_size; a trailing partial record
    is dropped.

    Raises:
        LumpOutOfBoundsError: the lump's byte range runs outside the file
        LumpExceedsMaximumError: more elements than the format allows
    """
    kind = LumpKind(kind)
    data = _get_lump_data(buffer, header, kind)
    layout = select_layout(kind, header.format_version)

    count = len(data) // layout.record_size
    maximum = LUMP_MAXIMUMS[kind]
    if count > maximum:
        raise LumpExceedsMaximumError(int(kind), count, maximum)

    records = data[:count * layout.record_size]
    return tuple(layout.build(vals) for vals in layout.record.iter_unpack(records))


# ─── Full decode ──────────────────────────────────────────────────────────────

def decode_buffer(buffer: ByteBuffer, verbose: bool = False) -> DecodedMap:
    """Decode the header and every supported lump of an in-memory BSP."""
    if verbose:
        print("Parsing header.. ", end='', flush=True)
    header = read_header(buffer)
    if verbose:
        print(f"BSP File version: {header.format_version}\t"
              f"Map revision: {header.map_revision}", flush=True)

    if verbose:
        print(f"Parsing lump {int(LumpKind.ENTITIES)} (entities).. ",
              end='', flush=True)
    entities = decode_entities(buffer, header)
    if verbose:
        print(f"{len(entities)} bytes", flush=True)

    lumps = {}
    for kind in RECORD_LUMPS:
        name = LUMP_FIELDS[kind]
        if verbose:
            print(f"Parsing lump {int(kind)} ({kind.name.lower()}).. ",
                  end='', flush=True)
        lumps[name] = decode_lump(buffer, header, kind)
        if verbose:
            print(f"{len(lumps[name])} {kind.name.lower()}", flush=True)

    return DecodedMap(header=header, entities=entities, **lumps)


def decode(filepath: Union[str, Path], verbose: bool = False) -> DecodedMap:
    """Read a BSP file from disk and decode it.

    Raises:
        BSPIOError: the file cannot be read
        BSPFormatError: the file is not a well-formed VBSP (see errors.py)
    """
    buffer = load_file(filepath)
    return decode_buffer(buffer, verbose=verbose)
