# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the cancellation signal shared by all the walks of an analysis."""

import threading
import time

from reposcope.errors import AnalysisCancelledError


class Cancellation:
    """A cancellation signal with an optional deadline."""

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the signal.

        Parameters
        ----------
        timeout : float | None
            The number of seconds after which the signal is considered raised. None or a
            non-positive value disables the deadline.
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout and timeout > 0 else None

    def cancel(self) -> None:
        """Raise the signal."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return True if the signal is raised or the deadline has passed."""
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self) -> None:
        """Raise ``AnalysisCancelledError`` if the signal is raised or the deadline has passed.

        Raises
        ------
        AnalysisCancelledError
            If the analysis must stop.
        """
        if self._event.is_set():
            raise AnalysisCancelledError("The analysis was cancelled.")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise AnalysisCancelledError("The analysis timed out.")

    def remaining(self) -> float | None:
        """Return the number of seconds left before the deadline, or None if there is no deadline."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def sleep(self, seconds: float) -> None:
        """Wait for ``seconds``, returning early when the signal is raised or the deadline passes.

        Raises
        ------
        AnalysisCancelledError
            If the analysis must stop.
        """
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(seconds)
        self.raise_if_cancelled()
