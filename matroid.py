from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from groundset import ElementSet, empty_set
from errors import OracleInconsistencyError, SubsetViolationError
from utils.utils import setup_logger

logger = setup_logger(__name__)


@runtime_checkable
class Matroid(Protocol):
    """
    The oracle surface every algorithm in this package depends on.

    Any object exposing these three methods is a matroid as far as the
    algorithms are concerned. Callers must only pass subsets of
    ``ground_set()`` to ``rank`` and ``independent``.
    """

    def ground_set(self) -> ElementSet:
        ...

    def rank(self, s: ElementSet) -> int:
        ...

    def independent(self, s: ElementSet) -> bool:
        ...


def check_subset(ground: ElementSet, s: ElementSet):
    """Raises ``SubsetViolationError`` unless ``s`` is a subset of ``ground``."""
    if not s.is_subset_of(ground):
        raise SubsetViolationError(f"{s!r} is not a subset of the ground set {ground!r}")


class RankMatroid:
    """
    A matroid given by a ground set and a rank function.

    The rank function receives a subset of the ground set and must return its
    rank; the matroid axioms are the caller's responsibility. Independence is
    derived from the rank.

    Attributes
    ----------
    rank_fn : Callable[[ElementSet], int]
        The user-supplied rank oracle.
    name : str
        Label used in log messages.
    """
    def __init__(self, ground_set: ElementSet, rank_fn: Callable[[ElementSet], int], name: str = "matroid"):
        self._ground_set = ground_set
        self.rank_fn = rank_fn
        self.name = name

    def ground_set(self) -> ElementSet:
        return self._ground_set

    def rank(self, s: ElementSet) -> int:
        check_subset(self._ground_set, s)
        return self.rank_fn(s)

    def independent(self, s: ElementSet) -> bool:
        return self.rank(s) == s.cardinality()

    def __repr__(self):
        return f"RankMatroid({self.name!r}, n={self._ground_set.cardinality()})"


def _greedy_scan(m: Matroid, elements, start: ElementSet = None) -> ElementSet:
    current = start.clone() if start is not None else empty_set(m.ground_set().get_type())
    for e in elements:
        if e in current:
            continue
        current.add(e)
        if not m.independent(current):
            current.remove(e)
    return current


def get_base_of(m: Matroid) -> ElementSet:
    """Returns an arbitrary basis of ``m``, scanning the ground set in its natural order."""
    return _greedy_scan(m, m.ground_set().to_list())


def get_maximal_base_of(m: Matroid) -> ElementSet:
    """
    Returns a maximum-weight basis of ``m``.

    Elements are scanned by descending weight, ties broken by key, so the
    result is deterministic. By the matroid greedy theorem no other basis has
    a larger total weight.
    """
    ordered = sorted(m.ground_set().to_list(), key=lambda e: (-e.weight, e.key))
    return _greedy_scan(m, ordered)


def extend_to_base(m: Matroid, s: ElementSet) -> ElementSet:
    """
    Greedily extends the independent set ``s`` to a basis of ``m``.

    Heavier elements are tried first. ``s`` itself is not modified.

    Raises
    ------
    SubsetViolationError
        If ``s`` is not a subset of the ground set.
    OracleInconsistencyError
        If ``s`` is not independent, or the extension falls short of the rank.
    """
    ground = m.ground_set()
    check_subset(ground, s)
    if not m.independent(s):
        raise OracleInconsistencyError(f"{s!r} is not independent; cannot extend to a base")
    ordered = sorted(ground.to_list(), key=lambda e: (-e.weight, e.key))
    base = _greedy_scan(m, ordered, start=s)
    r = m.rank(ground)
    if base.cardinality() != r:
        logger.warning(f"extension reached size {base.cardinality()}, rank is {r}")
        raise OracleInconsistencyError("Failed to extend to a base.")
    return base


class DualMatroid:
    """
    The dual of a matroid.

    Holds the wrapped matroid's rank function rather than the matroid itself;
    ``independent`` is computed from the dual rank only, so no call ever goes
    back through the wrapped matroid's ``independent``.
    """
    def __init__(self, ground_set: ElementSet, rank_fn: Callable[[ElementSet], int]):
        self._ground_set = ground_set
        self.r = rank_fn

    def ground_set(self) -> ElementSet:
        return self._ground_set

    def rank(self, s: ElementSet) -> int:
        # complement() rejects anything that is not a subset of the ground set
        c = self._ground_set.complement(s)
        return self.r(c) + s.cardinality() - self.r(self._ground_set)

    def independent(self, s: ElementSet) -> bool:
        return s.cardinality() == self.rank(s)


def dual(m: Matroid) -> DualMatroid:
    """Returns the dual matroid of ``m``, sharing its ground set."""
    return DualMatroid(m.ground_set(), m.rank)
