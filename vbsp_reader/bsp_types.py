"""
BSP Types — constants and record definitions for Source Engine VBSP files.

Each record mirrors one on-disk structure from bspfile.h. Records are
frozen dataclasses so a decoded map cannot be mutated after decode returns.

BSP Lump Layout (decoded lumps):
    LUMP_ENTITIES   (0)  — ASCII text, kept as raw bytes
    LUMP_PLANES     (1)  — dplane_t (20 bytes)
    LUMP_TEXDATA    (2)  — dtexdata_t (32 bytes)
    LUMP_VERTEXES   (3)  — dvertex_t (12 bytes)
    LUMP_NODES      (5)  — dnode_t (32 bytes)
    LUMP_FACES      (7)  — dface_t (56 bytes)
    LUMP_LEAFS      (10) — dleaf_t (56 bytes up to v19, 32 bytes from v20)
    LUMP_EDGES      (12) — dedge_t (4 bytes)
    LUMP_SURFEDGES  (13) — int32 (4 bytes)
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple, Union


# ─── BSP Constants ────────────────────────────────────────────────────────────

IDBSPHEADER = 0x50534256  # 'VBSP' in little-endian
HEADER_LUMPS = 64
HEADER_SIZE = 8 + HEADER_LUMPS * 16 + 4  # ident, version, lumps, mapRevision

# Leafs lost their embedded ambient light cube in map version 20
LEAF_AMBIENT_LIGHTING_MAX_VERSION = 19


class LumpKind(IntEnum):
    """Lumps this package decodes; the value is the directory index."""
    ENTITIES = 0
    PLANES = 1
    TEXDATA = 2
    VERTEXES = 3
    NODES = 5
    FACES = 7
    LEAFS = 10
    EDGES = 12
    SURFEDGES = 13


MAX_MAP_PLANES = 65536
MAX_MAP_VERTS = 65536
MAX_MAP_EDGES = 256000
MAX_MAP_SURFEDGES = 512000
MAX_MAP_FACES = 65536
MAX_MAP_TEXDATAS = 2048
MAX_MAP_NODES = 65536
MAX_MAP_LEAFS = 65536

LUMP_MAXIMUMS = {
    LumpKind.PLANES: MAX_MAP_PLANES,
    LumpKind.TEXDATA: MAX_MAP_TEXDATAS,
    LumpKind.VERTEXES: MAX_MAP_VERTS,
    LumpKind.NODES: MAX_MAP_NODES,
    LumpKind.FACES: MAX_MAP_FACES,
    LumpKind.LEAFS: MAX_MAP_LEAFS,
    LumpKind.EDGES: MAX_MAP_EDGES,
    LumpKind.SURFEDGES: MAX_MAP_SURFEDGES,
}


# ─── Header ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LumpDirectoryEntry:
    """lump_t descriptor from the header (16 bytes)."""
    file_offset: int
    byte_length: int
    version: int
    tag: bytes   # fourCC, 4 raw bytes

    @property
    def is_empty(self) -> bool:
        return self.byte_length == 0


@dataclass(frozen=True)
class FileHeader:
    """dheader_t: identifier, version, 64-entry lump directory, map revision."""
    identifier: int
    format_version: int
    lumps: Tuple[LumpDirectoryEntry, ...]
    map_revision: int

    def lump(self, index: Union[int, LumpKind]) -> LumpDirectoryEntry:
        return self.lumps[int(index)]


# ─── Records ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Vector3:
    """Three float32 components; plane normals, vertex positions, reflectivity."""
    x: float
    y: float
    z: float

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scale: float) -> Vector3:
        return Vector3(self.x * scale, self.y * scale, self.z * scale)

    def length(self) -> float:
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)

    def normalized(self) -> Vector3:
        """Unit vector in the same direction. A zero vector stays zero."""
        length = self.length()
        if length == 0:
            return self
        return Vector3(self.x / length, self.y / length, self.z / length)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


Vertex = Vector3


@dataclass(frozen=True)
class Plane:
    """dplane_t (20 bytes)."""
    normal: Vector3
    distance: float
    kind: int    # PLANE_X / PLANE_Y / ... axis hint


@dataclass(frozen=True)
class Edge:
    """dedge_t (4 bytes): two indices into the vertex lump."""
    vertex_index: Tuple[int, int]


@dataclass(frozen=True)
class Surfedge:
    """Signed int32 edge reference.

    Non-negative = edge edge_index traversed v0→v1, negative = edge
    -(edge_index + 1) traversed reversed (v1→v0).
    """
    edge_index: int

    @property
    def reversed(self) -> bool:
        return self.edge_index < 0

    @property
    def edge(self) -> int:
        """Index into the edge lump, with the winding sign removed."""
        if self.edge_index < 0:
            return -(self.edge_index + 1)
        return self.edge_index


@dataclass(frozen=True)
class TextureData:
    """dtexdata_t (32 bytes)."""
    reflectivity: Vector3
    name_table_id: int     # index into TEXDATA_STRING_TABLE
    width: int
    height: int
    view_width: int
    view_height: int


@dataclass(frozen=True)
class Face:
    """dface_t (56 bytes)."""
    plane_index: int
    side: int              # faces opposite to the node's plane direction
    on_node: int           # 1 if on node, 0 if in leaf
    first_edge: int        # index into surfedges
    edge_count: int
    texinfo: int
    dispinfo: int          # -1 = not a displacement
    fog_volume_id: int
    styles: Tuple[int, int, int, int]
    light_offset: int      # offset into lighting lump (-1 = no lightmap)
    area: float
    lightmap_mins: Tuple[int, int]
    lightmap_size: Tuple[int, int]
    orig_face: int         # face this was split from
    prim_count: int
    first_prim_id: int
    smoothing_groups: int


@dataclass(frozen=True)
class Node:
    """dnode_t (32 bytes)."""
    plane_index: int
    children: Tuple[int, int]   # negative = -(leafs+1), not nodes
    mins: Tuple[int, int, int]
    maxs: Tuple[int, int, int]
    first_face: int
    face_count: int
    area: int


@dataclass(frozen=True)
class ColorRGBExp32:
    r: int
    g: int
    b: int
    exponent: int   # signed

    def to_linear(self) -> Tuple[float, float, float]:
        """value = byte_value * 2^exponent"""
        scale = 2.0 ** self.exponent
        return (self.r * scale, self.g * scale, self.b * scale)


@dataclass(frozen=True)
class CompressedLightCube:
    """Six ColorRGBExp32 samples, one per axis direction (+X -X +Y -Y +Z -Z)."""
    colors: Tuple[ColorRGBExp32, ...]


@dataclass(frozen=True)
class Leaf:
    """dleaf_t.

    The area (9 bits) and flags (7 bits) share one short on disk.
    ambient_lighting is only present in maps up to version 19.
    """
    contents: int
    cluster: int
    area: int
    flags: int
    mins: Tuple[int, int, int]
    maxs: Tuple[int, int, int]
    first_leaf_face: int
    leaf_face_count: int
    first_leaf_brush: int
    leaf_brush_count: int
    leaf_water_data_id: int    # -1 for not in water
    ambient_lighting: Optional[CompressedLightCube] = None


# ─── Decoded map ──────────────────────────────────────────────────────────────

LUMP_FIELDS = {
    LumpKind.ENTITIES: 'entities',
    LumpKind.PLANES: 'planes',
    LumpKind.TEXDATA: 'texture_data',
    LumpKind.VERTEXES: 'vertexes',
    LumpKind.NODES: 'nodes',
    LumpKind.FACES: 'faces',
    LumpKind.LEAFS: 'leafs',
    LumpKind.EDGES: 'edges',
    LumpKind.SURFEDGES: 'surfedges',
}


@dataclass(frozen=True)
class DecodedMap:
    """Every decoded lump of one BSP file, each in file order."""
    header: FileHeader
    entities: bytes
    planes: Tuple[Plane, ...] = ()
    texture_data: Tuple[TextureData, ...] = ()
    vertexes: Tuple[Vertex, ...] = ()
    faces: Tuple[Face, ...] = ()
    edges: Tuple[Edge, ...] = ()
    surfedges: Tuple[Surfedge, ...] = ()
    nodes: Tuple[Node, ...] = ()
    leafs: Tuple[Leaf, ...] = ()

    @property
    def entity_text(self) -> str:
        return self.entities.decode('ascii', errors='replace').rstrip('\x00')

    def lump(self, index: Union[int, LumpKind]):
        """Return the decoded container for a lump index.

        Raises KeyError for lumps this package does not decode.
        """
        try:
            kind = LumpKind(index)
        except ValueError:
            raise KeyError(f"lump {index} is not decoded") from None
        return getattr(self, LUMP_FIELDS[kind])
