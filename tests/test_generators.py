import numpy as np
import pytest

from conerefine import GeneratorTable


def test_append_and_index():
    t = GeneratorTable(2, [[1, 0], [1, 2]])
    assert len(t) == 2
    assert t.append([1, 1]) == 2
    assert t[2] == (1, 1)
    assert t.index([1, 2]) == 1
    assert t.index(np.array([1, 1])) == 2
    assert t.index([5, 5]) is None


def test_contains():
    t = GeneratorTable(3, [[1, 0, 0]])
    assert [1, 0, 0] in t
    assert (1, 0, 1) not in t
    assert [1, 0] not in t


def test_indices_are_stable():
    t = GeneratorTable(2, [[1, 0]])
    keys = t.extend([[0, 1], [1, 1], [1, 0]])
    assert keys == [1, 2, 3]
    assert t.index([1, 0]) == 0
    assert list(t) == [(1, 0), (0, 1), (1, 1), (1, 0)]


def test_invalid_rays():
    t = GeneratorTable(2)
    with pytest.raises(ValueError):
        t.append([0, 0])
    with pytest.raises(ValueError):
        t.append([1, 2, 3])
    with pytest.raises(ValueError):
        t.append([1, 0.5])
    with pytest.raises(ValueError):
        t.append([2, 0])
    with pytest.raises(ValueError):
        t.append([-3, 6])
    assert len(t) == 0


def test_submatrix_and_array():
    t = GeneratorTable(2, [[1, 0], [1, 2], [1, 1]])
    assert t.submatrix([2, 0]) == [(1, 1), (1, 0)]
    assert t.as_array().tolist() == [[1, 0], [1, 2], [1, 1]]
    assert GeneratorTable(3).as_array().shape == (0, 3)
    assert t.dim() == 2
