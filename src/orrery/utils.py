"""
Utility functions and classes for the Orrery package.
"""

from collections import deque
from time import perf_counter
import warnings
from typing import Optional, Type
from .config import config

class Timer:
    """
    Context manager for timing code execution.

    Examples
    --------
    >>> from orrery.utils import Timer
    >>> with Timer("Reload"):
    ...     system.reload(document)
    Reload: 0.012345 s

    >>> with Timer(verbose=False) as t:
    ...     # ... code ...
    >>> print(f"Took {t.elapsed:.6f} seconds")
    """
    def __init__(self, name="Operation", verbose=True):
        """
        Parameters
        ----------
        name : str, optional
            Name to display when timing completes (default: "Operation")
        verbose : bool, optional
            Whether to print timing automatically (default: True)
        """
        self.name = name
        self.verbose = verbose
        self.elapsed = None

    def __enter__(self):
        self.start = perf_counter()
        return self

    def __exit__(self, *args):
        self.end = perf_counter()
        self.elapsed = self.end - self.start
        if self.verbose:
            print(f"{self.name}: {self.elapsed:.6f} s")


class FrameRateCounter:
    """
    Rolling frames-per-second estimate for the render loop.

    Diagnostic only; nothing in the orbital core depends on it.

    Examples
    --------
    >>> fps = FrameRateCounter(window=60)
    >>> for dt in frame_times:
    ...     fps.tick(dt)
    >>> fps.fps
    59.8
    """
    def __init__(self, window: int = 60):
        if window < 1:
            raise ValueError(f"window must be at least 1, got {window}")
        self._frames = deque(maxlen=window)

    def tick(self, dt: float) -> float:
        """Record one frame of duration dt [s] and return the current estimate."""
        if dt > 0:
            self._frames.append(dt)
        return self.fps

    @property
    def fps(self) -> float:
        """Average frames per second over the window (0.0 before any frame)."""
        total = sum(self._frames)
        if total <= 0:
            return 0.0
        return len(self._frames) / total

    def reset(self):
        self._frames.clear()

    def __len__(self):
        return len(self._frames)


def validation_error(message: str, error_class: Type[Exception] = ValueError,
                     warning_class: Optional[Type[Warning]] = None):
    """
    Raise error or warn based on config.STRICT_VALIDATION.

    This function provides consistent validation behavior across the package.
    When STRICT_VALIDATION is True (default), raises the specified exception.
    When False, issues a warning instead.

    Parameters
    ----------
    message : str
        Validation error message
    error_class : Type[Exception], optional
        Exception class to raise if STRICT_VALIDATION is True.
        Default: ValueError
    warning_class : Type[Warning], optional
        Warning category used when STRICT_VALIDATION is False.
        Default: UserWarning

    Raises
    ------
    Exception (of type error_class)
        If config.STRICT_VALIDATION is True

    Warns
    -----
    UserWarning (or warning_class)
        If config.STRICT_VALIDATION is False

    Examples
    --------
    >>> from orrery.utils import validation_error
    >>> from orrery import config
    >>> config.STRICT_VALIDATION = True
    >>> validation_error("Invalid value")  # Raises ValueError
    >>> validation_error("Bad graph", MalformedGraphError)  # Raises MalformedGraphError

    >>> config.STRICT_VALIDATION = False
    >>> validation_error("Invalid value")  # Issues warning
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    else:
        warnings.warn(message, warning_class or UserWarning, stacklevel=2)
