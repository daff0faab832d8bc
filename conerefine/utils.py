# =============================================================================
# This file is part of conerefine.
#
# conerefine is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or (at your option) any later
# version.
#
# conerefine is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# conerefine. If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
#
# -----------------------------------------------------------------------------
# Description:  This module contains the exact linear algebra used by the
#               refinement engine: ray parsing, scalar products, determinants
#               and facet normals of simplicial cones.
# -----------------------------------------------------------------------------

# 'standard' imports
import math

# 3rd party imports
import flint
import numpy as np

# conerefine imports
from conerefine.errors import IllDimensioned

# typing
from numpy.typing import ArrayLike

# coordinates of this size no longer fit in a 64-bit numpy array
_INT64_MAX = np.iinfo(np.int64).max


# ray parsing
# -----------
def to_int_vector(v: "ArrayLike", dim: int = None) -> tuple:
    """
    **Description:**
    Converts a vector with integral entries (Python ints, numpy integers,
    flint fmpz or integral floats) to a tuple of Python ints.

    **Arguments:**
    - `v`: The vector.
    - `dim`: The expected length, if any.

    **Returns:**
    The vector as a tuple of Python ints.

    **Example:**
    ```python {3}
    import numpy as np
    from conerefine.utils import to_int_vector
    to_int_vector(np.array([1, 2, 3]))
    # (1, 2, 3)
    ```
    """
    out = []
    for c in v:
        n = int(c)
        if n != c:
            raise ValueError(f"Entry {c} of {list(v)} is not an integer.")
        out.append(n)

    if dim is not None and len(out) != dim:
        raise ValueError(
            f"Vector {out} has length {len(out)} but {dim} was expected."
        )
    return tuple(out)


def to_numpy(rows: list) -> np.ndarray:
    """
    **Description:**
    Converts a list of integer vectors to a numpy array. A 64-bit integer
    array is returned whenever possible and an object array otherwise, so no
    entry is ever truncated.

    **Arguments:**
    - `rows`: The vectors.

    **Returns:**
    The 2D numpy array whose rows are the input vectors.
    """
    if any(abs(c) > _INT64_MAX for r in rows for c in r):
        return np.array([list(r) for r in rows], dtype=object)
    return np.array([list(r) for r in rows], dtype=int)


def primitive(v: tuple) -> tuple:
    """
    **Description:**
    Divides an integer vector by the gcd of its entries.

    **Arguments:**
    - `v`: The integer vector.

    **Returns:**
    The primitive vector along v. The zero vector is returned unchanged.

    **Example:**
    ```python {2}
    from conerefine.utils import primitive
    primitive((2, -4, 6))
    # (1, -2, 3)
    ```
    """
    g = math.gcd(*v)
    if g <= 1:
        return tuple(v)
    return tuple(c // g for c in v)


# linear algebra
# --------------
def dot(u: tuple, v: tuple) -> int:
    """
    Exact scalar product of two integer vectors.
    """
    return sum(int(a) * int(b) for a, b in zip(u, v))


def rank(gens: "ArrayLike") -> int:
    """
    **Description:**
    Computes the rank of a set of integer vectors.

    **Arguments:**
    - `gens`: The vectors, as rows.

    **Returns:**
    The rank.
    """
    gens = [list(r) for r in gens]
    if len(gens) == 0:
        return 0
    return flint.fmpz_mat(gens).rank()


def _square_matrix(gens: "ArrayLike") -> flint.fmpz_mat:
    # the rays of a full-dimensional simplicial cone as a flint matrix
    gens = [list(r) for r in gens]
    if len(gens) == 0:
        raise IllDimensioned("A simplicial cone needs at least one ray.")

    dim = len(gens[0])
    if any(len(r) != dim for r in gens):
        raise IllDimensioned("The rays have different lengths.")
    if len(gens) != dim:
        raise IllDimensioned(
            f"Expected {dim} rays to span a simplicial cone in dimension "
            f"{dim}, but {len(gens)} were given."
        )

    return flint.fmpz_mat(gens)


def _fmpq_to_int(c: flint.fmpq) -> int:
    if int(c.q) != 1:
        raise ArithmeticError(f"Expected an integer but found {c}.")
    return int(c.p)


def scaled_inverse(gens: "ArrayLike") -> tuple:
    """
    **Description:**
    Computes |det(V)|*V^{-1} for the matrix V whose rows are the rays of a
    full-dimensional simplicial cone. This is an integer matrix. Its i-th
    column vanishes on every ray but the i-th one, and the coordinates of a
    vector x with respect to the rays are x@N/|det(V)|.

    **Arguments:**
    - `gens`: The rays of the simplicial cone, as rows.

    **Returns:**
    A tuple (N, D) where N is the scaled inverse as a list of rows and D is
    |det(V)|.

    **Example:**
    ```python {2}
    from conerefine.utils import scaled_inverse
    scaled_inverse([[1, 0], [1, 2]])
    # ([[2, 0], [-1, 1]], 2)
    ```
    """
    M = _square_matrix(gens)

    det = int(M.det())
    if det == 0:
        raise IllDimensioned(
            f"The rays {[list(r) for r in gens]} span a cone of rank "
            f"{rank(gens)} instead of {len(gens)}."
        )
    D = abs(det)

    inv = M.inv()
    N = [[_fmpq_to_int(c * D) for c in row] for row in inv.tolist()]
    return N, D


def simplex_volume(gens: "ArrayLike") -> int:
    """
    **Description:**
    Computes the multiplicity (normalized volume) of a full-dimensional
    simplicial cone, that is the index of the lattice generated by its rays.

    **Arguments:**
    - `gens`: The rays of the simplicial cone, as rows.

    **Returns:**
    The multiplicity, a positive integer.

    **Example:**
    ```python {2}
    from conerefine.utils import simplex_volume
    simplex_volume([[1, 0], [1, 2]])
    # 2
    ```
    """
    M = _square_matrix(gens)
    det = abs(int(M.det()))
    if det == 0:
        raise IllDimensioned(
            f"The rays {[list(r) for r in gens]} span a cone of rank "
            f"{rank(gens)} instead of {len(gens)}."
        )
    return det


def simplex_data(gens: "ArrayLike") -> tuple:
    """
    **Description:**
    Computes the facet normals and the multiplicity of a full-dimensional
    simplicial cone.

    The normals are primitive and inward-pointing. The i-th normal is the one
    of the facet opposite to the i-th ray, i.e. it vanishes on all the other
    rays and is positive on the i-th one.

    **Arguments:**
    - `gens`: The rays of the simplicial cone, as rows.

    **Returns:**
    A tuple (normals, multiplicity), where normals is a list of tuples.

    **Example:**
    ```python {2}
    from conerefine.utils import simplex_data
    simplex_data([[1, 0], [1, 2]])
    # ([(2, -1), (0, 1)], 2)
    ```
    """
    N, D = scaled_inverse(gens)
    dim = len(N)

    normals = [primitive(tuple(N[j][i] for j in range(dim))) for i in range(dim)]
    return normals, D
