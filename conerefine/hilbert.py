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
# Description:  This module contains the Hilbert basis computations for
#               simplicial cones that drive the unimodular refinement.
# -----------------------------------------------------------------------------

# 'standard' imports
from ast import literal_eval
import os
import subprocess
import tempfile
import warnings

# conerefine imports
from conerefine import config
from conerefine import utils
from conerefine.errors import OracleFailure

# typing
from numpy.typing import ArrayLike


class HilbertBasisOracle:
    """
    Base class of the Hilbert basis computations for full-dimensional
    simplicial cones. Subclasses implement [`compute`](#compute).

    Oracles must be pure functions of the rays they are given, since they may
    be sent to worker processes.
    """

    def __call__(self, gens: "ArrayLike") -> list:
        return self.compute(gens)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def compute(self, gens: "ArrayLike") -> list:
        """
        **Description:**
        Computes the Hilbert basis of the cone spanned by the input rays.

        **Arguments:**
        - `gens`: The rays of a full-dimensional simplicial cone, as rows.

        **Returns:**
        *(list)* The Hilbert basis, as a sorted list of tuples.
        """
        raise NotImplementedError


class ParallelepipedHilbertBasis(HilbertBasisOracle):
    """
    Computes the Hilbert basis of a simplicial cone in pure Python.

    Every lattice point of the cone is a non-negative integral combination of
    the rays plus a lattice point of the half-open fundamental parallelepiped
    {sum_i l_i v_i : 0 <= l_i < 1}. The parallelepiped points are enumerated
    as the subgroup of (Z/D)^d, D = |det(V)|, generated by the coordinates of
    the unit vectors. The Hilbert basis consists of the irreducible elements
    among these points and the rays.

    **Example:**
    We compute the Hilbert basis of a two-dimensional cone.
    ```python {3}
    from conerefine.hilbert import ParallelepipedHilbertBasis
    oracle = ParallelepipedHilbertBasis()
    oracle.compute([[1, 3], [2, 1]])
    # [(1, 1), (1, 2), (1, 3), (2, 1)]
    ```
    """

    def compute(self, gens: "ArrayLike") -> list:
        gens = [utils.to_int_vector(r) for r in gens]
        N, D = utils.scaled_inverse(gens)
        dim = len(gens)

        if D > config.large_multiplicity:
            warnings.warn(
                f"Computing the Hilbert basis of a simplex with multiplicity "
                f"{D}. This may take a long time."
            )

        # coordinates (scaled by D) of the parallelepiped points
        zero = (0,) * dim
        steps = [tuple(c % D for c in row) for row in N]
        seen = {zero}
        frontier = [zero]
        while frontier:
            mu = frontier.pop()
            for s in steps:
                nu = tuple((a + b) % D for a, b in zip(mu, s))
                if nu not in seen:
                    seen.add(nu)
                    frontier.append(nu)
        seen.discard(zero)

        candidates = [(mu, self._point(mu, gens, D)) for mu in seen]
        for i, g in enumerate(gens):
            mu = tuple(D * (i == j) for j in range(dim))
            candidates.append((mu, g))

        # x is reducible iff x-y lies in the cone for another candidate y
        basis = []
        for mu_x, x in candidates:
            reducible = False
            for mu_y, y in candidates:
                if y == x:
                    continue
                if all(a >= b for a, b in zip(mu_x, mu_y)):
                    reducible = True
                    break
            if not reducible:
                basis.append(x)

        return sorted(basis)

    @staticmethod
    def _point(mu: tuple, gens: list, D: int) -> tuple:
        # the lattice point with coordinates mu/D
        dim = len(gens[0])
        return tuple(
            sum(m * g[c] for m, g in zip(mu, gens)) // D for c in range(dim)
        )


class NormalizHilbertBasis(HilbertBasisOracle):
    """
    Computes the Hilbert basis of a simplicial cone by running Normaliz. The
    path to the executable is read from `config.normaliz_path`.

    **Example:**
    ```python {3}
    from conerefine.hilbert import NormalizHilbertBasis
    oracle = NormalizHilbertBasis()
    oracle.compute([[1, 3], [2, 1]])
    # [(1, 1), (1, 2), (1, 3), (2, 1)]
    ```
    """

    def compute(self, gens: "ArrayLike") -> list:
        gens = [list(utils.to_int_vector(r)) for r in gens]
        if len(gens) == 0:
            raise OracleFailure("No rays were given to Normaliz.")

        with tempfile.TemporaryDirectory(prefix="conerefine_") as tmp:
            proj_name = os.path.join(tmp, "simplex")
            with open(f"{proj_name}.in", "w") as f:
                f.write(f"amb_space {len(gens[0])}\ncone {len(gens)}\n")
                for r in gens:
                    f.write(" ".join(str(c) for c in r) + "\n")

            try:
                normaliz = subprocess.run(
                    (config.normaliz_path, "-N", f"{proj_name}.in"),
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    universal_newlines=True,
                )
            except OSError as e:
                raise OracleFailure(
                    f"Could not run normaliz at '{config.normaliz_path}': {e}"
                ) from e
            if normaliz.returncode != 0:
                raise OracleFailure(
                    f"Normaliz exited with code {normaliz.returncode}:\n"
                    f"{normaliz.stderr}"
                )

            try:
                with open(f"{proj_name}.out") as f:
                    data = f.readlines()
            except OSError as e:
                raise OracleFailure("Normaliz produced no output file.") from e

        return sorted(set(self._parse(data)))

    @staticmethod
    def _parse(data: list) -> list:
        # read the Hilbert basis blocks that follow the line of stars
        rays = []
        found_stars = False
        l_n = 0
        while l_n < len(data):
            l = data[l_n]
            if "******" in l:
                found_stars = True
            elif found_stars and "Hilbert basis elements" in l:
                n_rays = literal_eval(l.split()[0])
                for i in range(n_rays):
                    rays.append(
                        tuple(literal_eval(c) for c in data[l_n + 1 + i].split())
                    )
                l_n += n_rays + 1
                continue
            l_n += 1

        if len(rays) == 0:
            raise OracleFailure("No Hilbert basis found in the Normaliz output.")
        return rays
