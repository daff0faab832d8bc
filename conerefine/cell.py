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
# Description:  This module contains the simplicial cones that make up a
#               refinement forest, along with their facet tests.
# -----------------------------------------------------------------------------

# conerefine imports
from conerefine import utils


class SimplexCell:
    """
    This class describes one node of a refinement forest: a full-dimensional
    simplicial cone spanned by some rays of the forest's generator table.

    Cells are never modified geometrically. Refining a cell creates new cells
    on the next level and records their positions in `children`, which freezes
    the cell.

    :::note
    Cells are not intended to be constructed directly. They are created by
    [`RefinementForest`](./forest).
    :::

    **Arguments:**
    - `rays`: The indices of the spanning rays.
    - `multiplicity`: The multiplicity of the simplicial cone.
    - `level`: The level of the forest that holds the cell.
    - `position`: The index of the cell within its level.
    """

    def __init__(self, rays: "list[int]", multiplicity: int, level: int,
                 position: int):
        self.rays = tuple(sorted(int(k) for k in rays))
        self.multiplicity = int(multiplicity)
        self.level = level
        self.position = position
        self.children = []

        # facet normals, computed on first use
        self._facets = None

    def __repr__(self) -> str:
        out = (f"A simplex on rays {list(self.rays)} with multiplicity "
               f"{self.multiplicity} at level {self.level}, position "
               f"{self.position}")
        if self.children:
            out += f", refined into {self.children}"
        return out

    def is_leaf(self) -> bool:
        """
        Returns True if the cell has not been refined.
        """
        return len(self.children) == 0

    def is_unimodular(self) -> bool:
        """
        Returns True if the cell has multiplicity one.
        """
        return self.multiplicity == 1

    def facets(self, table: "GeneratorTable") -> list:
        """
        **Description:**
        Returns the inward-pointing facet normals of the cell. The i-th
        normal is the one of the facet opposite to the ray `rays[i]`. The
        result is cached.

        **Arguments:**
        - `table`: The generator table that the ray indices refer to.

        **Returns:**
        *(list)* The normals, as tuples.
        """
        if self._facets is None:
            self._facets, _ = utils.simplex_data(table.submatrix(self.rays))
        return self._facets

    def opposite_facets(self, ray: tuple, table: "GeneratorTable",
                        token: "CancellationToken" = None) -> "list | None":
        """
        **Description:**
        Locates a ray with respect to the cell. Each facet normal is paired
        with the ray: a negative value means that the ray is outside of the
        cell, a zero value that the ray lies on the hyperplane of that facet,
        and a positive value that the facet is opposite to the ray.

        **Arguments:**
        - `ray`: The ray to locate.
        - `table`: The generator table that the ray indices refer to.
        - `token`: A cancellation token to poll between facets.

        **Returns:**
        *(list or None)* None if the ray is outside of the cell. Otherwise the
        positions (in `rays`) of the opposite facets.
        """
        opposite = []
        for i, normal in enumerate(self.facets(table)):
            if token is not None:
                token.check()

            test = utils.dot(ray, normal)
            if test < 0:
                return None
            if test == 0:
                continue
            opposite.append(i)

        return opposite

    def contains(self, ray: tuple, table: "GeneratorTable",
                 strict: bool = False) -> bool:
        """
        **Description:**
        Checks whether a vector lies in the cell.

        **Arguments:**
        - `ray`: The vector.
        - `table`: The generator table that the ray indices refer to.
        - `strict`: Whether to require the vector to be in the interior.

        **Returns:**
        *(bool)* The truth value of the vector being in the cell.
        """
        values = [utils.dot(ray, n) for n in self.facets(table)]
        if strict:
            return all(v > 0 for v in values)
        return all(v >= 0 for v in values)
