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

# Make the main classes and functions accessible from the root of conerefine.
from conerefine import config
from conerefine.cancellation import CancellationToken
from conerefine.cell import SimplexCell
from conerefine.errors import (
    ComputationInterrupted,
    ConeRefineError,
    IllDimensioned,
    InternalInconsistency,
    OracleFailure,
)
from conerefine.forest import RefinementForest
from conerefine.generators import GeneratorTable
from conerefine.hilbert import (
    HilbertBasisOracle,
    NormalizHilbertBasis,
    ParallelepipedHilbertBasis,
)

# Latest version
version = "0.1.0"
