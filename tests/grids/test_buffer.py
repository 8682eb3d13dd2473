import numpy as np
import pytest

from heatgrid.grids.buffer import (
    EAST,
    NORTH,
    SOUTH,
    WEST,
    AllocationError,
    ConstantSourceMask,
    GridBuffer,
    cell_position,
    flat_index,
    neighbor_index,
)


@pytest.mark.parametrize("dim", [1, 3, 5])
def test_index_mapping(dim):
    """test that the flat index and the cell position are inverse to each other"""
    indices = [flat_index(x, y, dim) for y in range(dim) for x in range(dim)]
    assert indices == list(range(dim * dim))
    for index in range(dim * dim):
        assert flat_index(*cell_position(index, dim), dim) == index


def test_neighbor_index():
    """test the neighbor lookup in the interior and at the edges"""
    dim = 4
    i = flat_index(1, 2, dim)
    assert neighbor_index(i, *NORTH, dim) == flat_index(1, 1, dim)
    assert neighbor_index(i, *SOUTH, dim) == flat_index(1, 3, dim)
    assert neighbor_index(i, *WEST, dim) == flat_index(0, 2, dim)
    assert neighbor_index(i, *EAST, dim) == flat_index(2, 2, dim)

    # neighbors outside the grid are replaced by the cell itself
    for x, y, offset in [(0, 1, WEST), (3, 1, EAST), (2, 0, NORTH), (2, 3, SOUTH)]:
        i = flat_index(x, y, dim)
        assert neighbor_index(i, *offset, dim) == i

    # no wrapping across rows
    assert neighbor_index(flat_index(3, 1, dim), *EAST, dim) != flat_index(0, 2, dim)


def test_grid_buffer():
    """test basic properties of GridBuffer"""
    grid = GridBuffer(3)
    assert grid.dim == 3
    assert grid.size == 9
    assert grid.dtype == np.float64
    assert grid.data.shape == (9,)
    np.testing.assert_array_equal(grid.data, 0)
    assert grid.writeable
    assert isinstance(repr(grid), str)

    grid[2, 1] = 5
    assert grid.data[2 + 1 * 3] == 5
    assert grid.data2d[1, 2] == 5
    assert grid[2, 1] == 5
    assert grid.index(2, 1) == 5
    assert grid.position(5) == (2, 1)
    assert sorted(grid.neighbors(0, 0)) == [0, 0, 1, 3]

    with pytest.raises(IndexError):
        grid[3, 0]
    with pytest.raises(IndexError):
        grid.position(9)

    grid.fill(2)
    np.testing.assert_array_equal(grid.data, 2)

    assert GridBuffer(2, "float32", fill=1).dtype == np.float32
    np.testing.assert_array_equal(GridBuffer(2, fill=1).data, 1)


def test_grid_buffer_from_array():
    """test creating grids from two-dimensional arrays"""
    values = np.arange(4).reshape(2, 2)
    grid = GridBuffer.from_array(values)
    assert grid[1, 0] == 1
    assert grid[0, 1] == 2
    np.testing.assert_array_equal(grid.data, [0, 1, 2, 3])

    with pytest.raises(ValueError):
        GridBuffer.from_array(np.zeros((2, 3)))
    with pytest.raises(ValueError):
        GridBuffer.from_array(np.zeros(4))


def test_grid_buffer_errors():
    """test invalid arguments for GridBuffer"""
    with pytest.raises(ValueError):
        GridBuffer(0)
    with pytest.raises(ValueError):
        GridBuffer(2, dtype=int)

    grid = GridBuffer(2)
    grid.check_compatible(GridBuffer(2))
    with pytest.raises(ValueError):
        grid.check_compatible(GridBuffer(3))
    with pytest.raises(ValueError):
        grid.check_compatible(GridBuffer(2, "float32"))


def test_grid_buffer_allocation_error(monkeypatch):
    """test that failed allocations are reported"""

    def fail(*args, **kwargs):
        raise MemoryError

    monkeypatch.setattr(np, "full", fail)
    with pytest.raises(AllocationError):
        GridBuffer(4)
    with pytest.raises(MemoryError):
        ConstantSourceMask(4)


def test_grid_buffer_release():
    """test releasing the memory of a grid"""
    grid = GridBuffer(4)
    grid.release()
    assert grid.dim == 0
    assert grid.size == 0
    assert grid.data.size == 0


def test_constant_source_mask():
    """test the mask of constant sources"""
    mask = ConstantSourceMask(3)
    assert mask.num_sources == 0
    assert not mask.frozen

    mask[1, 1] = 0.5
    mask[0, 2] = -1
    assert mask.num_sources == 2
    np.testing.assert_array_equal(np.flatnonzero(mask.pinned), [4, 6])

    mask.freeze()
    assert mask.frozen
    assert not mask.writeable
    with pytest.raises(ValueError):
        mask[0, 0] = 1
    with pytest.raises(ValueError):
        mask.fill(1)
    assert mask.num_sources == 2
