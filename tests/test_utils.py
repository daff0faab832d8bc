import numpy as np
import pytest

from conerefine import IllDimensioned
from conerefine import utils


def test_to_int_vector():
    assert utils.to_int_vector(np.array([1, -2, 3])) == (1, -2, 3)
    assert utils.to_int_vector([2.0, 0]) == (2, 0)
    assert all(type(c) is int for c in utils.to_int_vector(np.array([4, 5])))


def test_to_int_vector_rejects_fractions():
    with pytest.raises(ValueError):
        utils.to_int_vector([1, 0.5])


def test_to_int_vector_checks_dimension():
    with pytest.raises(ValueError):
        utils.to_int_vector([1, 2], dim=3)


def test_to_numpy_keeps_large_entries():
    small = utils.to_numpy([(1, 2), (3, 4)])
    assert small.dtype == int
    big = utils.to_numpy([(2**70, 1), (0, 1)])
    assert big.dtype == object
    assert big[0, 0] == 2**70


def test_primitive():
    assert utils.primitive((2, -4, 6)) == (1, -2, 3)
    assert utils.primitive((0, 3)) == (0, 1)
    assert utils.primitive((1, 2)) == (1, 2)


def test_dot():
    assert utils.dot((1, 2, 3), (4, -5, 6)) == 12
    assert utils.dot((2**80, 1), (2**80, 1)) == 2**160 + 1


def test_rank():
    assert utils.rank([[1, 0, 0], [0, 1, 0], [1, 1, 0]]) == 2
    assert utils.rank([]) == 0


def test_simplex_volume():
    assert utils.simplex_volume([[1, 0], [1, 2]]) == 2
    assert utils.simplex_volume([[1, 2], [1, 0]]) == 2
    assert utils.simplex_volume([[1, 0, 0], [1, 2, 0], [1, 0, 2]]) == 4


def test_scaled_inverse():
    N, D = utils.scaled_inverse([[1, 0], [1, 2]])
    assert D == 2
    assert N == [[2, 0], [-1, 1]]


def test_simplex_data():
    normals, mult = utils.simplex_data([[1, 0], [1, 2]])
    assert mult == 2
    assert normals == [(2, -1), (0, 1)]


def test_simplex_data_normals_are_opposite_to_rays():
    gens = [[1, 0, 0], [1, 2, 0], [1, 0, 2]]
    normals, mult = utils.simplex_data(gens)
    assert mult == 4
    for i, n in enumerate(normals):
        for j, g in enumerate(gens):
            if i == j:
                assert utils.dot(g, n) > 0
            else:
                assert utils.dot(g, n) == 0


def test_simplex_data_negative_determinant():
    normals, mult = utils.simplex_data([[0, 1], [1, 0]])
    assert mult == 1
    assert normals == [(0, 1), (1, 0)]


def test_dependent_rays_are_ill_dimensioned():
    with pytest.raises(IllDimensioned):
        utils.simplex_data([[1, 0], [2, 0]])
    with pytest.raises(IllDimensioned):
        utils.simplex_volume([[1, 2, 3], [2, 4, 6], [0, 0, 1]])


def test_dependent_rays_report_their_rank():
    with pytest.raises(IllDimensioned, match="rank 1 instead of 2"):
        utils.simplex_data([[1, 0], [2, 0]])
    with pytest.raises(IllDimensioned, match="rank 2 instead of 3"):
        utils.simplex_volume([[1, 2, 3], [2, 4, 6], [0, 0, 1]])


def test_wrong_number_of_rays_is_ill_dimensioned():
    with pytest.raises(IllDimensioned):
        utils.simplex_data([[1, 0, 0], [0, 1, 0]])
    with pytest.raises(IllDimensioned):
        utils.simplex_volume([])
