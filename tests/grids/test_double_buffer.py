import numpy as np
import pytest

from heatgrid.grids import DoubleBuffer, GridBuffer


def test_double_buffer_swap():
    """test that swapping exchanges the roles without copying data"""
    first, second = GridBuffer(3), GridBuffer(3)
    buffers = DoubleBuffer(first, second)
    assert buffers.current is first
    assert buffers.next is second
    assert buffers.slots == (first, second)

    data_first, data_second = first.data, second.data
    buffers.swap()
    assert buffers.current is second
    assert buffers.next is first
    assert buffers.current.data is data_second
    assert buffers.next.data is data_first

    # modifying the new current grid changes the original object in place
    buffers.current.fill(3)
    np.testing.assert_array_equal(second.data, 3)
    np.testing.assert_array_equal(first.data, 0)

    buffers.swap()
    assert buffers.current is first
    assert isinstance(repr(buffers), str)


def test_double_buffer_errors():
    """test invalid combinations of grids"""
    grid = GridBuffer(2)
    with pytest.raises(ValueError):
        DoubleBuffer(grid, grid)
    with pytest.raises(ValueError):
        DoubleBuffer(grid, GridBuffer(3))
    with pytest.raises(ValueError):
        DoubleBuffer(grid, GridBuffer(2, "float32"))


def test_double_buffer_allocate():
    """test allocating and releasing a double buffer"""
    buffers = DoubleBuffer.allocate(4, "float32")
    assert buffers.current is not buffers.next
    assert buffers.current.data is not buffers.next.data
    assert buffers.current.dtype == np.float32
    assert buffers.next.dim == 4

    buffers.release()
    assert all(grid.size == 0 for grid in buffers.slots)
