import itertools

import networkx as nx
import pytest

from groundset import ElementSet
from matroid import RankMatroid


def uniform_matroid(ground: ElementSet, r: int, name="uniform") -> RankMatroid:
    return RankMatroid(ground, lambda s: min(s.cardinality(), r), name=name)


def graphic_matroid(ground: ElementSet, name="graphic") -> RankMatroid:
    """Cycle matroid of the graph whose edges are the keys ``"<u>-<v>"``."""
    def rank(s):
        g = nx.Graph()
        g.add_edges_from(tuple(key.split("-")) for key in s.keys())
        return g.number_of_nodes() - nx.number_connected_components(g)
    return RankMatroid(ground, rank, name=name)


def partition_matroid(ground: ElementSet, block_of: dict, capacity: int = 1, name="partition") -> RankMatroid:
    def rank(s):
        counts = {}
        for key in s.keys():
            counts[block_of[key]] = counts.get(block_of[key], 0) + 1
        return sum(min(c, capacity) for c in counts.values())
    return RankMatroid(ground, rank, name=name)


def subsets(ground: ElementSet):
    """Every subset of ``ground`` as an ElementSet."""
    elements = ground.to_list()
    for r in range(len(elements) + 1):
        for combo in itertools.combinations(elements, r):
            yield ElementSet(ground.get_type(), combo)


def brute_force_intersection(m1, m2):
    """All common independent sets of two matroids."""
    return [s for s in subsets(m1.ground_set()) if m1.independent(s) and m2.independent(s)]


@pytest.fixture
def abc():
    return ElementSet.from_weights({"a": 1.0, "b": 1.0, "c": 1.0})


@pytest.fixture
def weighted4():
    return ElementSet.from_weights({"w": 4.0, "x": 1.0, "y": 3.0, "z": 2.0})


@pytest.fixture
def bipartite():
    """Edges of a small weighted bipartite graph as a ground set.

    Keys are ``"<left>-<right>"``; a matching is a common independent set of
    the partition matroids over left and right endpoints.
    """
    edges = {
        "u1-v1": 6.0,
        "u1-v2": 5.0,
        "u2-v1": 5.0,
        "u2-v3": 2.0,
        "u3-v2": 4.0,
        "u3-v3": 1.0,
        "u4-v3": 3.0,
    }
    return ElementSet.from_weights(edges, set_type="edges")
