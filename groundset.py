from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping

import config
from errors import SetTypeError, SubsetViolationError


@dataclass(frozen=True)
class Element:
    """An immutable member of a ground set.

    Attributes
    ----------
    key : str
        Stable identity of the element. Two elements of the same type with the
        same key are the same element, whatever their weights.
    weight : float
        Real weight, used for greedy ordering and exchange costs.
    set_type : str
        Type tag of the ground set the element belongs to.
    """

    key: str
    weight: float = field(default=0.0, compare=False)
    set_type: str = config.DEFAULT_SET_TYPE

    def __repr__(self):
        return f"Element({self.key!r}, {self.weight!r})"


class ElementSet:
    """
    A mutable collection of elements sharing one type tag.

    Elements are indexed by key, so no two members share a key. Iteration
    follows insertion order, which is stable and restartable.

    Attributes
    ----------
    set_type : str
        The type tag every member must carry. Two matroids are only comparable
        when their ground sets have the same tag.
    """
    def __init__(self, set_type: str = config.DEFAULT_SET_TYPE, elements: Iterable[Element] = ()):
        self.set_type = set_type
        self._members: Dict[str, Element] = {}
        for e in elements:
            self.add(e)

    @classmethod
    def from_weights(cls, weights: Mapping[str, float], set_type: str = config.DEFAULT_SET_TYPE) -> "ElementSet":
        """Builds a set from a ``{key: weight}`` mapping, keeping the mapping order."""
        return cls(set_type, (Element(key, float(w), set_type) for key, w in weights.items()))

    def get_type(self) -> str:
        return self.set_type

    def _check_type(self, e: Element):
        if e.set_type != self.set_type:
            raise SetTypeError(
                f"element {e.key!r} has set type {e.set_type!r}, expected {self.set_type!r}"
            )

    def add(self, e: Element):
        self._check_type(e)
        self._members[e.key] = e

    def remove(self, e: Element):
        """Removes ``e``; raises ``KeyError`` when it is not a member."""
        self._check_type(e)
        del self._members[e.key]

    def discard(self, e: Element):
        if e.set_type == self.set_type:
            self._members.pop(e.key, None)

    def swap(self, out: Element, in_: Element):
        """
        Removes ``out`` and adds ``in_`` in a single step.

        Used to probe ``S - out + in_`` without rebuilding the set. The set is
        left untouched when the swap is not possible.

        Raises
        ------
        KeyError
            If ``out`` is not a member or ``in_`` already is.
        """
        self._check_type(out)
        self._check_type(in_)
        if out.key not in self._members:
            raise KeyError(out.key)
        if in_.key in self._members:
            raise KeyError(in_.key)
        del self._members[out.key]
        self._members[in_.key] = in_

    def clone(self) -> "ElementSet":
        copied = ElementSet(self.set_type)
        copied._members = dict(self._members)
        return copied

    def is_subset_of(self, other: "ElementSet") -> bool:
        if self.set_type != other.set_type:
            return False
        return all(key in other._members for key in self._members)

    def complement(self, subset: "ElementSet") -> "ElementSet":
        """
        Returns the elements of this set that are not in ``subset``.

        Parameters
        ----------
        subset : ElementSet
            Must be contained in this set.

        Raises
        ------
        SubsetViolationError
            If ``subset`` has another type tag or holds an element outside this set.
        """
        if subset.set_type != self.set_type:
            raise SubsetViolationError(
                f"incomparable set types: {subset.set_type!r} and {self.set_type!r}"
            )
        outside = [key for key in subset._members if key not in self._members]
        if outside:
            raise SubsetViolationError(f"not a subset: {sorted(outside)} outside the receiver")
        return ElementSet(self.set_type, (e for key, e in self._members.items() if key not in subset._members))

    def cardinality(self) -> int:
        return len(self._members)

    def weight(self) -> float:
        """Total weight of the members."""
        return sum(e.weight for e in self._members.values())

    def keys(self) -> List[str]:
        return list(self._members)

    def to_list(self) -> List[Element]:
        return list(self._members.values())

    def iter(self) -> Iterator[Element]:
        return iter(self)

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self._members.values()))

    def __len__(self):
        return len(self._members)

    def __contains__(self, e):
        if isinstance(e, Element):
            return e.set_type == self.set_type and e.key in self._members
        return e in self._members

    def __eq__(self, other):
        if not isinstance(other, ElementSet):
            return NotImplemented
        return self.set_type == other.set_type and self._members.keys() == other._members.keys()

    __hash__ = None

    def __repr__(self):
        return f"ElementSet({self.set_type!r}, {self.keys()})"


def empty_set(set_type: str = config.DEFAULT_SET_TYPE) -> ElementSet:
    return ElementSet(set_type)
