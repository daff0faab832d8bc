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
# Description:  This module contains the append-only table of rays shared by
#               all the simplices of a refinement forest.
# -----------------------------------------------------------------------------

# 3rd party imports
import numpy as np

# conerefine imports
from conerefine import utils

# typing
from numpy.typing import ArrayLike
from typing import Iterator


class GeneratorTable:
    """
    This class stores the rays of a refinement forest. Rays are integer
    vectors identified by their (0-based) position in the table. Rays are only
    ever appended, so indices are stable for the lifetime of the table.

    **Arguments:**
    - `dim`: The ambient dimension.
    - `rays`: Initial rays, if any.

    **Example:**
    We build a table, add a ray and look it up by value.
    ```python {3,4}
    from conerefine.generators import GeneratorTable
    t = GeneratorTable(2, [[1, 0], [1, 2]])
    t.append([1, 1])
    # 2
    t.index([1, 2])
    # 1
    ```
    """

    def __init__(self, dim: int, rays: "ArrayLike" = None):
        if dim < 1:
            raise ValueError("Zero-dimensional rays are not supported.")
        self._dim = dim
        self._rays = []
        self._index = {}

        if rays is not None:
            self.extend(rays)

    # basic interface
    # ---------------
    def __repr__(self) -> str:
        return f"A table of {len(self)} rays in dimension {self._dim}"

    def __len__(self) -> int:
        return len(self._rays)

    def __iter__(self) -> Iterator[tuple]:
        return iter(self._rays)

    def __getitem__(self, key: int) -> tuple:
        return self._rays[key]

    def __contains__(self, ray: "ArrayLike") -> bool:
        return self.index(ray) is not None

    def dim(self) -> int:
        """
        **Description:**
        Returns the ambient dimension of the rays.

        **Arguments:**
        None.

        **Returns:**
        *(int)* The dimension.
        """
        return self._dim

    # aliases
    ambient_dimension = dim

    # modification
    # ------------
    def append(self, ray: "ArrayLike") -> int:
        """
        **Description:**
        Appends a ray to the table. Appending a value that is already present
        creates a second entry; use [`index`](#index) first to avoid that.

        **Arguments:**
        - `ray`: The ray, a primitive non-zero integer vector.

        **Returns:**
        *(int)* The index of the new entry.
        """
        ray = utils.to_int_vector(ray, dim=self._dim)
        if not any(ray):
            raise ValueError("The zero vector is not a valid ray.")
        if utils.primitive(ray) != ray:
            raise ValueError(
                f"Ray {list(ray)} is not primitive. Divide it by the gcd of "
                "its entries."
            )

        key = len(self._rays)
        self._rays.append(ray)
        self._index.setdefault(ray, key)
        return key

    def extend(self, rays: "ArrayLike") -> list:
        """
        **Description:**
        Appends several rays to the table.

        **Arguments:**
        - `rays`: The rays, as rows.

        **Returns:**
        *(list)* The indices of the new entries.
        """
        return [self.append(r) for r in rays]

    # lookup
    # ------
    def index(self, ray: "ArrayLike") -> "int | None":
        """
        **Description:**
        Finds the first entry with the given value. The lookup is by exact
        value.

        **Arguments:**
        - `ray`: The ray to look up.

        **Returns:**
        *(int or None)* The index of the ray, or None if it is not present.
        """
        try:
            ray = utils.to_int_vector(ray, dim=self._dim)
        except ValueError:
            return None
        return self._index.get(ray)

    def submatrix(self, keys: "ArrayLike") -> list:
        """
        **Description:**
        Returns the rays with the given indices, in the given order.

        **Arguments:**
        - `keys`: The indices.

        **Returns:**
        *(list)* The rays, as tuples.
        """
        return [self._rays[k] for k in keys]

    def as_array(self) -> np.ndarray:
        """
        **Description:**
        Returns the full table as a numpy array. The array has 64-bit integer
        entries unless some coordinate is too large for that.

        **Arguments:**
        None.

        **Returns:**
        *(numpy.ndarray)* The rays, as rows.
        """
        if len(self._rays) == 0:
            return np.zeros((0, self._dim), dtype=int)
        return utils.to_numpy(self._rays)
