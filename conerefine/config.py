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
# Description:  This module contains various configuration variables for the
#               refinement engine and for custom installations.
# -----------------------------------------------------------------------------

# The number of CPU threads used when computing the Hilbert bases of the
# simplices in one refinement round. When set to None, a single thread is used
# for small rounds and all available threads otherwise.
n_threads = None

# Number of eligible simplices in a round above which n_threads=None switches
# to all available threads.
parallel_threshold = 32

# Path to the normaliz executable. Only needed by NormalizHilbertBasis.
normaliz_path = "normaliz"

# Multiplicity above which the pure-Python Hilbert basis computation warns
# that it may be slow. The number of enumerated points equals the
# multiplicity, and the irreducibility check is quadratic in it.
large_multiplicity = 10000


def set_normaliz_path(path: str) -> None:
    """
    **Description:**
    Sets a custom path to the normaliz executable.

    **Arguments:**
    - `path`: The path to the executable.

    **Returns:**
    Nothing.

    **Example:**
    ```python {2}
    import conerefine
    conerefine.config.set_normaliz_path("/usr/local/bin/normaliz")
    ```
    """
    global normaliz_path
    normaliz_path = path
