"""Decoder for Valve Source Engine compiled map files (VBSP)."""
from .bsp_reader import decode, decode_buffer, decode_entities, decode_lump, read_header
from .bsp_types import (
    ColorRGBExp32,
    CompressedLightCube,
    DecodedMap,
    Edge,
    Face,
    FileHeader,
    Leaf,
    LumpDirectoryEntry,
    LumpKind,
    Node,
    Plane,
    Surfedge,
    TextureData,
    Vector3,
    Vertex,
)
from .byte_buffer import ByteBuffer, load_file
from .errors import (
    BadMagicError,
    BSPError,
    BSPFormatError,
    BSPIOError,
    LumpExceedsMaximumError,
    LumpOutOfBoundsError,
    TruncatedHeaderError,
)

__version__ = '0.1.0'
