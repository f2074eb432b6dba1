from pathlib import Path

import pytest

from bsp_fixtures import PLANE_DTYPE, BSPBuilder, records


@pytest.fixture
def builder() -> BSPBuilder:
    return BSPBuilder()


@pytest.fixture
def one_plane_bsp(tmp_path) -> Path:
    """Valid header, one plane, every other lump empty."""
    planes = records(PLANE_DTYPE, 1)
    planes['normal'][0] = (0.0, 0.0, 1.0)
    planes['dist'][0] = 64.0
    planes['type'][0] = 2
    return BSPBuilder().add_lump(1, planes).write(tmp_path / 'one_plane.bsp')
