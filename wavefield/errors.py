"""Error taxonomy for the wave engine.

Every failure here is a contract violation by the caller (or a broken kernel
toolchain), never a transient condition, so nothing is retried. Each error also
derives from the closest builtin so callers can catch either.
"""

from __future__ import annotations

__all__ = [
    "WaveEngineError",
    "InvalidGridParametersError",
    "ShapeMismatchError",
    "FieldFormatError",
    "UninitializedBufferError",
    "EngineClosedError",
    "KernelCompileError",
]


class WaveEngineError(Exception):
    """Base class for all wavefield errors."""


class InvalidGridParametersError(WaveEngineError, ValueError):
    """Non-positive, non-finite or degenerate grid description."""


class ShapeMismatchError(WaveEngineError, ValueError):
    """A field's dimensions do not match the grid resolution."""


class FieldFormatError(WaveEngineError, TypeError):
    """A field has the wrong dtype or device, or aliases another ring buffer."""


class UninitializedBufferError(WaveEngineError, RuntimeError):
    """A step was attempted before all three state buffers were installed."""


class EngineClosedError(WaveEngineError, RuntimeError):
    """The engine (or its kernel) was used after shutdown."""


class KernelCompileError(WaveEngineError, RuntimeError):
    """The stencil program could not be built for the requested backend."""
