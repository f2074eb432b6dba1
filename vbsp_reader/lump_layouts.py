"""
Record layouts for fixed-size BSP lumps.

Every layout is an explicit little-endian struct format plus a builder that
turns one unpacked tuple into a record. Layouts are registered per
(lump kind, map version range); select_layout() picks the one matching the
file's header version. Only LUMP_LEAFS has more than one layout today:

    dleaf_t, version <= 19 (56 bytes):
        int contents, short cluster, short area:9/flags:7,
        short mins[3], short maxs[3], ushort firstleafface, numleaffaces,
        ushort firstleafbrush, numleafbrushes, short leafWaterDataID,
        CompressedLightCube ambientLighting (6 x ColorRGBExp32), short pad
    dleaf_t, version >= 20 (32 bytes):
        same fields without the light cube, padded to 32 bytes
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .bsp_types import (
    LEAF_AMBIENT_LIGHTING_MAX_VERSION,
    ColorRGBExp32,
    CompressedLightCube,
    Edge,
    Face,
    Leaf,
    LumpKind,
    Node,
    Plane,
    Surfedge,
    TextureData,
    Vector3,
)


@dataclass(frozen=True)
class LumpLayout:
    """One on-disk record layout for a lump kind over a version range."""
    kind: LumpKind
    record: struct.Struct
    build: Callable[[tuple], object]
    min_version: Optional[int] = None   # inclusive; None = unbounded
    max_version: Optional[int] = None

    @property
    def record_size(self) -> int:
        return self.record.size

    def matches(self, kind: LumpKind, version: int) -> bool:
        if kind != self.kind:
            return False
        if self.min_version is not None and version < self.min_version:
            return False
        return self.max_version is None or version <= self.max_version


# ─── Builders ─────────────────────────────────────────────────────────────────

def _build_plane(vals: tuple) -> Plane:
    nx, ny, nz, dist, ptype = vals
    return Plane(normal=Vector3(nx, ny, nz), distance=dist, kind=ptype)


def _build_texdata(vals: tuple) -> TextureData:
    return TextureData(
        reflectivity=Vector3(vals[0], vals[1], vals[2]),
        name_table_id=vals[3],
        width=vals[4],
        height=vals[5],
        view_width=vals[6],
        view_height=vals[7],
    )


def _build_vertex(vals: tuple) -> Vector3:
    return Vector3(*vals)


def _build_node(vals: tuple) -> Node:
    return Node(
        plane_index=vals[0],
        children=(vals[1], vals[2]),
        mins=(vals[3], vals[4], vals[5]),
        maxs=(vals[6], vals[7], vals[8]),
        first_face=vals[9],
        face_count=vals[10],
        area=vals[11],
    )


def _build_face(vals: tuple) -> Face:
    (planenum, side, on_node, firstedge, numedges, texinfo, dispinfo, fog,
     s0, s1, s2, s3, lightofs, area,
     lm_min_s, lm_min_t, lm_size_s, lm_size_t,
     orig_face, nprims, firstprim, smoothing) = vals
    return Face(
        plane_index=planenum,
        side=side,
        on_node=on_node,
        first_edge=firstedge,
        edge_count=numedges,
        texinfo=texinfo,
        dispinfo=dispinfo,
        fog_volume_id=fog,
        styles=(s0, s1, s2, s3),
        light_offset=lightofs,
        area=area,
        lightmap_mins=(lm_min_s, lm_min_t),
        lightmap_size=(lm_size_s, lm_size_t),
        orig_face=orig_face,
        prim_count=nprims,
        first_prim_id=firstprim,
        smoothing_groups=smoothing,
    )


def _build_edge(vals: tuple) -> Edge:
    return Edge(vertex_index=(vals[0], vals[1]))


def _build_surfedge(vals: tuple) -> Surfedge:
    return Surfedge(edge_index=vals[0])


def _leaf_fields(vals: tuple) -> dict:
    (contents, cluster, area_flags,
     min0, min1, min2, max0, max1, max2,
     firstleafface, numleaffaces,
     firstleafbrush, numleafbrushes,
     leaf_water) = vals[:14]
    # Bitfield: lower 9 bits = area, upper 7 bits = flags
    return dict(
        contents=contents,
        cluster=cluster,
        area=area_flags & 0x1FF,
        flags=(area_flags >> 9) & 0x7F,
        mins=(min0, min1, min2),
        maxs=(max0, max1, max2),
        first_leaf_face=firstleafface,
        leaf_face_count=numleaffaces,
        first_leaf_brush=firstleafbrush,
        leaf_brush_count=numleafbrushes,
        leaf_water_data_id=leaf_water,
    )


def _build_leaf(vals: tuple) -> Leaf:
    return Leaf(**_leaf_fields(vals))


def _build_leaf_v19(vals: tuple) -> Leaf:
    cube = vals[14:]
    colors = tuple(ColorRGBExp32(*cube[i:i + 4]) for i in range(0, 24, 4))
    return Leaf(**_leaf_fields(vals),
                ambient_lighting=CompressedLightCube(colors=colors))


# ─── Layout table ─────────────────────────────────────────────────────────────

_LEAF_BASE = 'ihH3h3h4Hh'

LAYOUTS: Tuple[LumpLayout, ...] = (
    LumpLayout(LumpKind.PLANES, struct.Struct('<3ffi'), _build_plane),
    LumpLayout(LumpKind.TEXDATA, struct.Struct('<3f5i'), _build_texdata),
    LumpLayout(LumpKind.VERTEXES, struct.Struct('<3f'), _build_vertex),
    LumpLayout(LumpKind.NODES, struct.Struct('<3i3h3h2Hh2x'), _build_node),
    # char fog volume id, then styles and one pad byte to align lightofs.
    # The SDK dface_t stores the fog id as a short instead.
    LumpLayout(LumpKind.FACES, struct.Struct('<Hbbihhhb4bxifiiiiiHHI'),
               _build_face),
    LumpLayout(LumpKind.LEAFS, struct.Struct('<' + _LEAF_BASE + '3Bb' * 6 + '2x'),
               _build_leaf_v19, max_version=LEAF_AMBIENT_LIGHTING_MAX_VERSION),
    LumpLayout(LumpKind.LEAFS, struct.Struct('<' + _LEAF_BASE + '2x'),
               _build_leaf, min_version=LEAF_AMBIENT_LIGHTING_MAX_VERSION + 1),
    LumpLayout(LumpKind.EDGES, struct.Struct('<2H'), _build_edge),
    LumpLayout(LumpKind.SURFEDGES, struct.Struct('<i'), _build_surfedge),
)


def select_layout(kind: LumpKind, version: int,
                  layouts: Tuple[LumpLayout, ...] = LAYOUTS) -> LumpLayout:
    """Find the record layout for a lump kind in a map of the given version."""
    for layout in layouts:
        if layout.matches(kind, version):
            return layout
    raise LookupError(f"No {kind.name} layout for BSP version {version}")