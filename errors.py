"""
Exceptions raised by the matroid algorithms.
"""


class MatroidError(Exception):
    """Base class for every error raised by this package."""
    pass


class GroundSetMismatchError(MatroidError, ValueError):
    """Raised when two matroids do not share the same ground set.

    Either the type tags differ or the ground sets hold different elements.
    """
    pass


class SubsetViolationError(MatroidError, ValueError):
    """Raised when an oracle or a complement is asked about a set that is
    not a subset of the relevant ground set."""
    pass


class SetTypeError(MatroidError, TypeError):
    """Raised when an element is mixed into a set of another type tag."""
    pass


class OracleInconsistencyError(MatroidError, RuntimeError):
    """Raised when a supplied oracle visibly violates the matroid axioms.

    Only cheap symptoms are detected (a negative cycle in the exchange graph,
    an independent set that cannot be extended); most violations go unnoticed.
    """
    pass
