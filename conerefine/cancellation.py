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
# Description:  This module contains the cancellation token that is polled by
#               the long-running loops of the refinement engine.
# -----------------------------------------------------------------------------

# 'standard' imports
import threading

# conerefine imports
from conerefine.errors import ComputationInterrupted


class CancellationToken:
    """
    A flag that can be raised from any thread to stop a running refinement.

    The refinement engine calls [`check`](#check) inside its facet-test,
    subdivision and Hilbert basis loops. Once [`cancel`](#cancel) has been
    called, the next check raises `ComputationInterrupted`.

    **Example:**
    We cancel a token and observe that checking it raises an exception.
    ```python {3}
    from conerefine import CancellationToken
    token = CancellationToken()
    token.cancel()
    token.check()
    # ComputationInterrupted: Computation was interrupted.
    ```
    """

    def __init__(self):
        self._event = threading.Event()

    def __repr__(self):
        state = "cancelled" if self.is_cancelled() else "active"
        return f"A cancellation token ({state})"

    def cancel(self) -> None:
        """
        **Description:**
        Requests cancellation. Safe to call from another thread.

        **Arguments:**
        None.

        **Returns:**
        Nothing.
        """
        self._event.set()

    def reset(self) -> None:
        """
        **Description:**
        Clears a previous cancellation request so the token can be reused.

        **Arguments:**
        None.

        **Returns:**
        Nothing.
        """
        self._event.clear()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def check(self) -> None:
        """
        **Description:**
        Raises `ComputationInterrupted` if cancellation was requested.

        **Arguments:**
        None.

        **Returns:**
        Nothing.
        """
        if self._event.is_set():
            raise ComputationInterrupted("Computation was interrupted.")
