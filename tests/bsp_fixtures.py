"""
Synthetic BSP file encoder for tests.

Records are laid out with numpy structured dtypes (explicit little-endian
field offsets, bspfile.h order) so the fixture encoder shares nothing with
the decoder's struct formats.
"""
from pathlib import Path
from typing import Dict, Tuple

import numpy as np

from vbsp_reader.bsp_types import HEADER_LUMPS, HEADER_SIZE, IDBSPHEADER


LUMP_DTYPE = np.dtype([
    ('fileofs', '<i4'),
    ('filelen', '<i4'),
    ('version', '<i4'),
    ('fourcc', 'S4'),
])

HEADER_DTYPE = np.dtype({
    'names': ['ident', 'version', 'lumps', 'map_revision'],
    'formats': ['<u4', '<i4', (LUMP_DTYPE, (HEADER_LUMPS,)), '<i4'],
    'offsets': [0, 4, 8, 8 + HEADER_LUMPS * 16],
    'itemsize': HEADER_SIZE,
})

PLANE_DTYPE = np.dtype({
    'names': ['normal', 'dist', 'type'],
    'formats': [('<f4', (3,)), '<f4', '<i4'],
    'offsets': [0, 12, 16],
    'itemsize': 20,
})

TEXDATA_DTYPE = np.dtype({
    'names': ['reflectivity', 'name_id', 'width', 'height',
              'view_width', 'view_height'],
    'formats': [('<f4', (3,)), '<i4', '<i4', '<i4', '<i4', '<i4'],
    'offsets': [0, 12, 16, 20, 24, 28],
    'itemsize': 32,
})

VERTEX_DTYPE = np.dtype(('<f4', (3,)))
EDGE_DTYPE = np.dtype(('<u2', (2,)))
SURFEDGE_DTYPE = np.dtype('<i4')

FACE_DTYPE = np.dtype({
    'names': ['planenum', 'side', 'on_node', 'firstedge', 'numedges',
              'texinfo', 'dispinfo', 'fog', 'styles', 'lightofs', 'area',
              'lm_mins', 'lm_size', 'orig_face', 'numprims', 'firstprim',
              'smoothing'],
    'formats': ['<u2', 'i1', 'i1', '<i4', '<i2', '<i2', '<i2', 'i1',
                ('i1', (4,)), '<i4', '<f4', ('<i4', (2,)), ('<i4', (2,)),
                '<i4', '<u2', '<u2', '<u4'],
    'offsets': [0, 2, 3, 4, 8, 10, 12, 14, 15, 20, 24, 28, 36, 44, 48, 50, 52],
    'itemsize': 56,
})

NODE_DTYPE = np.dtype({
    'names': ['planenum', 'children', 'mins', 'maxs', 'firstface',
              'numfaces', 'area'],
    'formats': ['<i4', ('<i4', (2,)), ('<i2', (3,)), ('<i2', (3,)),
                '<u2', '<u2', '<i2'],
    'offsets': [0, 4, 12, 18, 24, 26, 28],
    'itemsize': 32,
})

_LEAF_NAMES = ['contents', 'cluster', 'area_flags', 'mins', 'maxs',
               'firstleafface', 'numleaffaces', 'firstleafbrush',
               'numleafbrushes', 'water']
_LEAF_FORMATS = ['<i4', '<i2', '<u2', ('<i2', (3,)), ('<i2', (3,)),
                 '<u2', '<u2', '<u2', '<u2', '<i2']
_LEAF_OFFSETS = [0, 4, 6, 8, 14, 20, 22, 24, 26, 28]

LEAF_DTYPE = np.dtype({
    'names': _LEAF_NAMES,
    'formats': _LEAF_FORMATS,
    'offsets': _LEAF_OFFSETS,
    'itemsize': 32,
})

# Maps up to version 19: CompressedLightCube (6 x r,g,b,exponent) at 30
LEAF_V19_DTYPE = np.dtype({
    'names': _LEAF_NAMES + ['ambient'],
    'formats': _LEAF_FORMATS + [('u1', (6, 4))],
    'offsets': _LEAF_OFFSETS + [30],
    'itemsize': 56,
})


def records(dtype: np.dtype, count: int) -> np.ndarray:
    return np.zeros(count, dtype=dtype)


class BSPBuilder:
    """Assemble a VBSP file: header, then lumps packed 4-byte aligned."""

    def __init__(self, version: int = 20, map_revision: int = 1,
                 ident: int = IDBSPHEADER):
        self.version = version
        self.map_revision = map_revision
        self.ident = ident
        self._lumps: Dict[int, Tuple[bytes, int, bytes]] = {}
        self._directory: Dict[int, Tuple[int, int]] = {}

    def add_lump(self, index: int, payload, version: int = 0,
                 fourcc: bytes = b'') -> 'BSPBuilder':
        if isinstance(payload, np.ndarray):
            payload = payload.tobytes()
        self._lumps[index] = (bytes(payload), version, fourcc)
        return self

    def set_directory(self, index: int, fileofs: int, filelen: int) -> 'BSPBuilder':
        """Override a directory entry with raw (possibly bogus) values."""
        self._directory[index] = (fileofs, filelen)
        return self

    def build(self, trailing: bytes = b'') -> bytes:
        header = np.zeros(1, dtype=HEADER_DTYPE)
        header['ident'] = self.ident
        header['version'] = self.version
        header['map_revision'] = self.map_revision

        body = bytearray()
        lumps = header['lumps'][0]
        for index in sorted(self._lumps):
            payload, lump_version, fourcc = self._lumps[index]
            lumps['fileofs'][index] = HEADER_SIZE + len(body)
            lumps['filelen'][index] = len(payload)
            lumps['version'][index] = lump_version
            lumps['fourcc'][index] = fourcc
            body += payload
            body += b'\0' * (-len(body) % 4)

        for index, (fileofs, filelen) in self._directory.items():
            lumps['fileofs'][index] = fileofs
            lumps['filelen'][index] = filelen

        return header.tobytes() + bytes(body) + trailing

    def write(self, path: Path, trailing: bytes = b'') -> Path:
        path.write_bytes(self.build(trailing))
        return path
