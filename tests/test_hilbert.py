import shutil

import pytest

from conerefine import OracleFailure, config
from conerefine.hilbert import NormalizHilbertBasis, ParallelepipedHilbertBasis


def test_hilbert_basis():
    hb = ParallelepipedHilbertBasis().compute([[1, 3], [2, 1]])
    assert hb == [(1, 1), (1, 2), (1, 3), (2, 1)]


def test_hilbert_basis_of_unimodular_cone():
    hb = ParallelepipedHilbertBasis()([[1, 0], [0, 1]])
    assert hb == [(0, 1), (1, 0)]


def test_hilbert_basis_in_dimension_three():
    hb = ParallelepipedHilbertBasis().compute([[1, 0, 0], [1, 2, 0], [1, 0, 2]])
    assert hb == [
        (1, 0, 0),
        (1, 0, 1),
        (1, 0, 2),
        (1, 1, 0),
        (1, 1, 1),
        (1, 2, 0),
    ]


def test_hilbert_basis_drops_non_primitive_rays():
    hb = ParallelepipedHilbertBasis().compute([[2, 0], [0, 1]])
    assert hb == [(0, 1), (1, 0)]


def test_hilbert_basis_of_graded_cone():
    hb = ParallelepipedHilbertBasis().compute([[1, 0], [1, 5]])
    assert hb == [(1, 0), (1, 1), (1, 2), (1, 3), (1, 4), (1, 5)]


def test_large_multiplicity_warns(monkeypatch):
    monkeypatch.setattr(config, "large_multiplicity", 1)
    with pytest.warns(UserWarning):
        ParallelepipedHilbertBasis().compute([[1, 0], [1, 2]])


def test_normaliz_output_parsing():
    data = [
        "4 Hilbert basis elements\n",
        "2 extreme rays\n",
        "***********************************************************************\n",
        "\n",
        "4 Hilbert basis elements:\n",
        " 1 1\n",
        " 1 2\n",
        " 1 3\n",
        " 2 1\n",
        "\n",
        "2 extreme rays:\n",
        " 1 3\n",
        " 2 1\n",
    ]
    rays = NormalizHilbertBasis._parse(data)
    assert sorted(rays) == [(1, 1), (1, 2), (1, 3), (2, 1)]


def test_normaliz_output_without_basis():
    with pytest.raises(OracleFailure):
        NormalizHilbertBasis._parse(["*****\n", "2 extreme rays:\n"])


def test_missing_normaliz(monkeypatch):
    monkeypatch.setattr(config, "normaliz_path", "/nonexistent/normaliz")
    with pytest.raises(OracleFailure):
        NormalizHilbertBasis().compute([[1, 3], [2, 1]])


@pytest.mark.skipif(shutil.which("normaliz") is None,
                    reason="normaliz is not installed")
def test_normaliz_hilbert_basis():
    hb = NormalizHilbertBasis().compute([[1, 3], [2, 1]])
    assert hb == ParallelepipedHilbertBasis().compute([[1, 3], [2, 1]])
