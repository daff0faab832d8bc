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
# Description:  This module contains the refinement forest, which refines a
#               triangulation of a cone into a unimodular one by inserting
#               Hilbert basis elements of its simplices.
# -----------------------------------------------------------------------------

# 'standard' imports
from multiprocessing import cpu_count

# 3rd party imports
import joblib
import numpy as np

# conerefine imports
from conerefine import config
from conerefine import utils
from conerefine.cancellation import CancellationToken
from conerefine.cell import SimplexCell
from conerefine.errors import IllDimensioned, InternalInconsistency, OracleFailure
from conerefine.generators import GeneratorTable
from conerefine.hilbert import HilbertBasisOracle, ParallelepipedHilbertBasis

# typing
from numpy.typing import ArrayLike


class RefinementForest:
    """
    This class handles the refinement of a triangulation of a rational
    polyhedral cone into a unimodular triangulation.

    The simplices are stored level by level. Level 0 holds the input
    triangulation. When a ray is inserted into a simplex that contains it,
    the simplex is replaced by the simplices obtained by swapping the ray in
    for each of the rays opposite to it; these are appended to the next level
    and the original simplex is frozen. The current triangulation consists of
    the simplices that were never refined (the leaves).

    ## Constructor

    ### `conerefine.forest.RefinementForest`

    **Description:**
    Constructs a `RefinementForest` object from a triangulation.

    **Arguments:**
    - `rays`: The rays of the triangulation, as primitive integer vectors.
    - `simplices`: The simplices, each given by the indices of its rays. Each
        simplex must span a full-dimensional simplicial cone.
    - `multiplicities`: The multiplicities of the simplices. They are
        computed if not given.
    - `oracle`: The Hilbert basis computation used by
        [`make_unimodular`](#make_unimodular). Defaults to
        `ParallelepipedHilbertBasis`.
    - `check`: Whether to verify the given multiplicities.
    - `verbosity`: The verbosity level.

    **Example:**
    We refine a two-dimensional cone of multiplicity 2.
    ```python {2,3}
    from conerefine import RefinementForest
    f = RefinementForest([[1, 0], [1, 2]], [[0, 1]])
    f.make_unimodular()
    # 1
    f.export_triangulation()
    # [((1, 2), 1), ((0, 2), 1)]
    f.rays()
    # array([[1, 0],
    #        [1, 2],
    #        [1, 1]])
    ```
    """

    def __init__(
        self,
        rays: "ArrayLike",
        simplices: "ArrayLike",
        multiplicities: "ArrayLike" = None,
        oracle: HilbertBasisOracle = None,
        check: bool = True,
        verbosity: int = 0,
    ):
        """
        **Description:**
        Initializes a `RefinementForest` object.

        **Arguments:**
        - `rays`: The rays of the triangulation, as integer vectors.
        - `simplices`: The simplices, each given by the indices of its rays.
        - `multiplicities`: The multiplicities of the simplices. They are
            computed if not given.
        - `oracle`: The Hilbert basis computation.
        - `check`: Whether to verify the given multiplicities.
        - `verbosity`: The verbosity level.

        **Returns:**
        Nothing.
        """
        rays = [utils.to_int_vector(r) for r in rays]
        if len(rays) == 0:
            raise ValueError("At least one ray must be specified.")

        self._gens = GeneratorTable(len(rays[0]), rays)
        self._levels = [[]]
        self._known = set()
        self._oracle = ParallelepipedHilbertBasis() if oracle is None else oracle
        self._verbosity = verbosity

        simplices = [[int(k) for k in s] for s in simplices]
        if multiplicities is not None and len(multiplicities) != len(simplices):
            raise ValueError(
                f"{len(multiplicities)} multiplicities were given for "
                f"{len(simplices)} simplices."
            )

        for n, simp in enumerate(simplices):
            if len(set(simp)) != len(simp):
                raise IllDimensioned(f"Simplex {simp} has a repeated ray.")
            for k in simp:
                if not 0 <= k < len(self._gens):
                    raise IndexError(f"Simplex {simp} refers to unknown ray {k}.")

            if multiplicities is None:
                mult = utils.simplex_volume(self._gens.submatrix(simp))
            else:
                mult = int(multiplicities[n])
                if check:
                    computed = utils.simplex_volume(self._gens.submatrix(simp))
                    if computed != mult:
                        raise ValueError(
                            f"Simplex {simp} was given multiplicity {mult} "
                            f"but its multiplicity is {computed}."
                        )
            self._add_cell(0, simp, mult)

        if self._verbosity >= 2:
            print(self.describe(), flush=True)

    @classmethod
    def from_cone(cls, rays: "ArrayLike", **kwargs) -> "RefinementForest":
        """
        **Description:**
        Constructs a `RefinementForest` from a single simplicial cone, to be
        subdivided from scratch.

        **Arguments:**
        - `rays`: The rays of a full-dimensional simplicial cone.
        - `**kwargs`: Passed to the constructor.

        **Returns:**
        *(RefinementForest)* The forest with a single simplex.

        **Example:**
        ```python {2}
        from conerefine import RefinementForest
        f = RefinementForest.from_cone([[1, 0], [1, 3]])
        f.total_multiplicity()
        # 3
        ```
        """
        rays = list(rays)
        return cls(rays, [list(range(len(rays)))], **kwargs)

    def __repr__(self) -> str:
        return (
            f"A refinement forest of {len(self.leaves())} simplices on "
            f"{len(self._gens)} rays in dimension {self.ambient_dimension()}, "
            f"with {len(self._levels)} level(s)"
        )

    def describe(self) -> str:
        """
        **Description:**
        Returns a level-by-level description of every simplex in the forest,
        including the frozen ones.

        **Arguments:**
        None.

        **Returns:**
        *(str)* The description.
        """
        out = [f"Number of levels {len(self._levels)}"]
        for k, level in enumerate(self._levels):
            out.append(f"Level {k}, {len(level)} simplices")
            out.extend(f"    {cell}" for cell in level)
        return "\n".join(out)

    # getters
    # -------
    def ambient_dimension(self) -> int:
        """
        Returns the dimension of the lattice that the rays live in.
        """
        return self._gens.dim()

    def rays(self) -> np.ndarray:
        """
        **Description:**
        Returns the full table of rays, including those added during the
        refinement. Ray indices in the exported triangulation refer to rows of
        this array.

        **Arguments:**
        None.

        **Returns:**
        *(numpy.ndarray)* The rays, as rows.
        """
        return self._gens.as_array()

    def generator_table(self) -> GeneratorTable:
        return self._gens

    def known_rays(self) -> set:
        """
        **Description:**
        Returns the rays that are a vertex of some simplex of the forest.

        **Arguments:**
        None.

        **Returns:**
        *(set)* The rays, as tuples.
        """
        return set(self._known)

    def levels(self) -> list:
        """
        **Description:**
        Returns the simplices of the forest, grouped by level.

        **Arguments:**
        None.

        **Returns:**
        *(list)* A list with one list of `SimplexCell` objects per level.
        """
        return [list(level) for level in self._levels]

    def cell(self, level: int, position: int) -> SimplexCell:
        return self._levels[level][position]

    def leaves(self) -> list:
        """
        **Description:**
        Returns the simplices that have not been refined. These form the
        current triangulation.

        **Arguments:**
        None.

        **Returns:**
        *(list)* The `SimplexCell` objects, level by level.
        """
        return [cell for level in self._levels for cell in level if cell.is_leaf()]

    def total_multiplicity(self) -> int:
        """
        Returns the sum of the multiplicities of the current triangulation.
        """
        return sum(cell.multiplicity for cell in self.leaves())

    def is_unimodular(self) -> bool:
        """
        Returns True if every simplex of the current triangulation is
        unimodular.
        """
        return all(cell.is_unimodular() for cell in self.leaves())

    def export_triangulation(self) -> list:
        """
        **Description:**
        Returns the current triangulation.

        **Arguments:**
        None.

        **Returns:**
        *(list)* A list of pairs (ray indices, multiplicity), one per leaf.

        **Example:**
        ```python {3}
        from conerefine import RefinementForest
        f = RefinementForest([[1, 0], [0, 1]], [[0, 1]])
        f.export_triangulation()
        # [((0, 1), 1)]
        ```
        """
        return [(cell.rays, cell.multiplicity) for cell in self.leaves()]

    # aliases
    triangulation = export_triangulation

    # construction
    # ------------
    def _add_cell(self, level: int, keys: list, multiplicity: int,
                  parent: SimplexCell = None) -> SimplexCell:
        # append a cell and register it with its parent
        if level == len(self._levels):
            self._levels.append([])

        cell = SimplexCell(keys, multiplicity, level, len(self._levels[level]))
        self._levels[level].append(cell)
        if parent is not None:
            parent.children.append(cell.position)
        self._known.update(self._gens.submatrix(cell.rays))
        return cell

    def add_extra_generators(self, rays: "ArrayLike") -> list:
        """
        **Description:**
        Appends rays to the generator table without inserting them. Rays that
        are already in the table are skipped. Use
        [`insert_all_rays`](#insert_all_rays) to incorporate them.

        **Arguments:**
        - `rays`: The rays to add.

        **Returns:**
        *(list)* The indices of the rays that were appended.
        """
        keys = []
        for r in rays:
            r = utils.to_int_vector(r, dim=self.ambient_dimension())
            if r in self._known or r in self._gens:
                continue
            keys.append(self._gens.append(r))
        return keys

    # insertion
    # ---------
    def insert_ray(self, key: int, token: CancellationToken = None) -> None:
        """
        **Description:**
        Inserts the ray with the given index into the triangulation. Every
        simplex that contains the ray, other than as a multiple of one of its
        own rays, is subdivided.

        Nothing happens if the ray is already a vertex of some simplex.

        **Arguments:**
        - `key`: The index of the ray in the generator table.
        - `token`: A cancellation token. If it is cancelled, the insertion
            stops with `ComputationInterrupted`. Simplices are only ever
            appended, so the forest stays valid.

        **Returns:**
        Nothing.

        **Example:**
        We insert the ray (1,1) into the cone spanned by (1,0) and (1,2).
        ```python {4}
        from conerefine import RefinementForest
        f = RefinementForest([[1, 0], [1, 2]], [[0, 1]])
        k = f.add_extra_generators([[1, 1]])[0]
        f.insert_ray(k)
        f.export_triangulation()
        # [((1, 2), 1), ((0, 2), 1)]
        ```
        """
        if not 0 <= key < len(self._gens):
            raise IndexError(f"There is no ray with index {key}.")
        token = CancellationToken() if token is None else token

        if self._gens[key] in self._known:
            return

        for cell in self._levels[0]:
            self._refine(cell, key, token)

    def insert_all_rays(self, token: CancellationToken = None) -> None:
        """
        **Description:**
        Inserts every ray of the generator table, in order. Rays appended
        while this runs are not visited.

        **Arguments:**
        - `token`: A cancellation token.

        **Returns:**
        Nothing.
        """
        token = CancellationToken() if token is None else token
        n_rays = len(self._gens)
        for key in range(n_rays):
            self.insert_ray(key, token)

        if self._verbosity >= 1:
            print(f"Inserted {n_rays} rays, the triangulation has "
                  f"{len(self.leaves())} simplices", flush=True)

    def _refine(self, cell: SimplexCell, key: int,
                token: CancellationToken) -> None:
        # insert the ray with index key below cell
        opposite = cell.opposite_facets(self._gens[key], self._gens, token)

        # outside of the cell, or a multiple of one of its rays
        if opposite is None or len(opposite) <= 1:
            return

        if not cell.is_leaf():
            for d in cell.children:
                self._refine(self._levels[cell.level + 1][d], key, token)
            return

        # build every child before appending any of them
        new_cells = []
        for j in opposite:
            token.check()

            new_keys = list(cell.rays)
            new_keys[j] = key
            new_keys.sort()
            new_mult = utils.simplex_volume(self._gens.submatrix(new_keys))
            new_cells.append((new_keys, new_mult))

        for new_keys, new_mult in new_cells:
            self._add_cell(cell.level + 1, new_keys, new_mult, parent=cell)

    # unimodular refinement
    # ---------------------
    def make_unimodular(self, token: CancellationToken = None) -> int:
        """
        **Description:**
        Refines the triangulation until every simplex is unimodular.

        In each round, the Hilbert bases of all the simplices with
        multiplicity larger than one are computed (in parallel if configured,
        see `config.n_threads`). The elements that are not rays of their
        simplex are sorted, so that an element found in several simplices gets
        a single entry in the generator table, and inserted into the simplices
        that produced them. An element whose value already has an entry in the
        generator table, for example a ray of another simplex, reuses that
        index instead of being appended again. Rounds are repeated until no simplex with
        multiplicity larger than one remains.

        **Arguments:**
        - `token`: A cancellation token, polled between Hilbert basis
            computations and insertions.

        **Returns:**
        *(int)* The number of rounds in which rays were inserted.

        **Example:**
        ```python {3}
        from conerefine import RefinementForest
        f = RefinementForest([[1, 0, 0], [1, 2, 0], [1, 0, 2]], [[0, 1, 2]])
        f.make_unimodular()
        # 1
        f.total_multiplicity(), f.is_unimodular()
        # (4, True)
        ```
        """
        token = CancellationToken() if token is None else token

        rounds = 0
        while True:
            token.check()

            todo = [cell for cell in self.leaves() if cell.multiplicity > 1]
            if len(todo) == 0:
                break

            if self._verbosity >= 1:
                print(f"Round {rounds + 1}: computing the Hilbert bases of "
                      f"{len(todo)} simplices...", flush=True)

            results = self._compute_hilbert_bases(todo, token)

            # drop the rays of each simplex
            all_hilbs = []
            for place, basis in results:
                cell = self.cell(*place)
                own = set(self._gens.submatrix(cell.rays))
                new = [h for h in basis if h not in own]
                if len(new) == 0:
                    raise InternalInconsistency(
                        f"The Hilbert basis of simplex {list(cell.rays)} with "
                        f"multiplicity {cell.multiplicity} contains no new "
                        "elements."
                    )
                all_hilbs.extend((h, place) for h in new)

            all_hilbs.sort()

            if self._verbosity >= 1:
                print(f"Inserting {len(all_hilbs)} Hilbert basis elements of "
                      "simplices", flush=True)

            n_cells = sum(len(level) for level in self._levels)
            last_inserted = None
            key = None
            for h, place in all_hilbs:
                token.check()

                if h != last_inserted:
                    last_inserted = h
                    key = self._gens.index(h)
                    if key is None:
                        key = self._gens.append(h)
                self._refine(self.cell(*place), key, token)

            if sum(len(level) for level in self._levels) == n_cells:
                raise InternalInconsistency(
                    "No simplex was subdivided by the inserted Hilbert basis "
                    "elements."
                )
            rounds += 1

        if self._verbosity >= 2:
            print(self.describe(), flush=True)

        return rounds

    def _compute_hilbert_bases(self, cells: list,
                               token: CancellationToken) -> list:
        # configure threads
        n_threads = config.n_threads
        if n_threads is None:
            if len(cells) < config.parallel_threshold:
                n_threads = 1
            else:
                n_threads = cpu_count()

        tasks = [(self._gens.submatrix(c.rays), (c.level, c.position))
                 for c in cells]

        results = []
        if n_threads == 1:
            for gens, place in tasks:
                token.check()
                results.append(_hilbert_basis_task(self._oracle, gens, place))
            return results

        with joblib.Parallel(n_jobs=n_threads) as parallel:
            while len(tasks):
                token.check()

                # pull off a few simplices at a time
                batch = tasks[:4 * n_threads]
                tasks = tasks[4 * n_threads:]
                results.extend(parallel(
                    joblib.delayed(_hilbert_basis_task)(self._oracle, g, p)
                    for g, p in batch
                ))

        return results


def _hilbert_basis_task(oracle: HilbertBasisOracle, gens: list,
                        place: tuple) -> tuple:
    """
    **Description:**
    Computes the Hilbert basis of one simplex. This runs in the worker
    processes.

    **Arguments:**
    - `oracle`: The Hilbert basis computation.
    - `gens`: The rays of the simplex.
    - `place`: The (level, position) of the simplex, passed through.

    **Returns:**
    A tuple (place, basis), with basis a list of tuples.
    """
    try:
        basis = [utils.to_int_vector(h, dim=len(gens)) for h in oracle(gens)]
    except OracleFailure:
        raise
    except Exception as e:
        raise OracleFailure(
            f"Failed to compute the Hilbert basis of {[list(g) for g in gens]} "
            f"({type(e).__name__}: {e})"
        ) from e
    return place, basis
