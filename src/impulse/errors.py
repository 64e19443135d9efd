"""
Exception types raised by impulse.

invalid input is reported eagerly with InvalidArgument (a ValueError, so
callers catching ValueError keep working). failures coming out of an FFT
backend are wrapped in ExecutionFailure with the original exception chained.
"""


class ImpulseError(Exception):
    """Base class for all impulse errors."""


class InvalidArgument(ImpulseError, ValueError):
    """A length, buffer, band specification or other argument is invalid."""


class ExecutionFailure(ImpulseError, RuntimeError):
    """The execution backend could not perform the requested transform."""
