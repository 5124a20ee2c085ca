"""Exception types raised by signmesh.

Degenerate geometry is never an error in this package; it is filtered
or clamped where it is found.  The exceptions below cover the cases the
caller has to act on.
"""


class SignmeshError(ValueError):
    """Base class for signmesh errors."""


class GeometryLimitError(SignmeshError):
    """Raised when an input exceeds a configured size ceiling.

    Attributes:
        limit: Name of the :class:`~signmesh.config.KernelLimits` field
        value: Offending value
        maximum: Configured ceiling
    """

    def __init__(self, limit: str, value: int, maximum: int):
        self.limit = limit
        self.value = value
        self.maximum = maximum
        super().__init__(f"{limit} exceeded: {value} > {maximum}")


__all__ = ["SignmeshError", "GeometryLimitError"]
