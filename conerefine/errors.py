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
# Description:  This module contains the exceptions raised by the refinement
#               engine.
# -----------------------------------------------------------------------------


class ConeRefineError(Exception):
    """
    Base class of all the errors raised by conerefine.
    """


class IllDimensioned(ConeRefineError, ValueError):
    """
    A set of rays does not span a simplicial cone of the expected rank. This
    indicates a problem with the input triangulation.
    """


class OracleFailure(ConeRefineError, RuntimeError):
    """
    The Hilbert basis of a simplicial cone could not be computed.
    """


class ComputationInterrupted(ConeRefineError, RuntimeError):
    """
    A cancellation was requested while a computation was running. The forest
    is left in its last consistent state.
    """


class InternalInconsistency(ConeRefineError, RuntimeError):
    """
    The refinement made no progress on a simplex that is not unimodular.
    """
