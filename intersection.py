from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

import networkx as nx

import config
from errors import GroundSetMismatchError, OracleInconsistencyError
from groundset import Element, ElementSet, empty_set
from matroid import Matroid
from utils.utils import timer, setup_logger

logger = setup_logger(__name__)


class Mode(Enum):
    """
    What the intersection maximises.

    ``WEIGHTED_CARDINALITY`` is the default: it augments until no source-to-sink
    path remains, so its result is always a maximum common independent set.
    ``WEIGHT`` stops as soon as augmenting no longer adds weight; with zero or
    negative weights its result can be smaller than the maximum and can still
    have augmenting paths in its exchange graph.
    """
    # maximum cardinality, weights ignored
    CARDINALITY = "cardinality"
    # maximum total weight over all common independent sets
    WEIGHT = "weight"
    # maximum total weight among the maximum-cardinality common independent sets
    WEIGHTED_CARDINALITY = "weighted_cardinality"

    @classmethod
    def parse(cls, value) -> "Mode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown intersection mode: {value!r}. Expected one of {[m.value for m in cls]}"
            ) from None

    @property
    def weighted(self) -> bool:
        return self is not Mode.CARDINALITY


def check_compatible(m1: Matroid, m2: Matroid):
    """
    Checks that two matroids can be intersected.

    Raises
    ------
    GroundSetMismatchError
        If the ground sets carry different type tags or hold different elements.
    """
    g1, g2 = m1.ground_set(), m2.ground_set()
    if g1.get_type() != g2.get_type():
        raise GroundSetMismatchError(
            f"incomparable set types: {g1.get_type()!r} and {g2.get_type()!r}"
        )
    if g1 != g2:
        only_1 = sorted(set(g1.keys()) - set(g2.keys()))
        only_2 = sorted(set(g2.keys()) - set(g1.keys()))
        raise GroundSetMismatchError(
            f"unequal ground sets: only in first {only_1}, only in second {only_2}"
        )


class ExchangeGraph:
    """
    The exchange digraph of a common independent set ``S``.

    Vertices are integers ``0..n-1`` mapped from element keys, members of
    ``S`` first. For ``e`` in ``S`` and ``f`` outside it there is an edge
    ``e -> f`` when ``S - e + f`` is independent in the first matroid, and an
    edge ``f -> e`` when it is independent in the second.

    Every vertex carries a ``cost``: ``weight`` for members of ``S`` and
    ``-weight`` for the others. The cost of a path is the sum of its vertex
    costs, which equals ``w(S) - w(S')`` where ``S'`` is the set after the
    path is toggled; every edge repeats the cost of its head so that
    standard edge-weighted routines see the same lengths. ``exchange`` on an
    edge is ``weight(f) - weight(e)`` for the swap it stands for.

    Attributes
    ----------
    graph : nx.DiGraph
        The digraph; node attributes ``element``, ``in_set`` and ``cost``.
    key_to_node : dict
        Element key to vertex id.
    sources : set
        Vertices outside ``S`` that can be added alone in the first matroid (X1).
    sinks : set
        Vertices outside ``S`` that can be added alone in the second matroid (X2).
    """
    def __init__(self, graph: nx.DiGraph, key_to_node: Dict[str, int], sources: Set[int], sinks: Set[int]):
        self.graph = graph
        self.key_to_node = key_to_node
        self.sources = sources
        self.sinks = sinks

    @classmethod
    def build(cls, s: ElementSet, c: ElementSet, m1: Matroid, m2: Matroid) -> "ExchangeGraph":
        """
        Builds the exchange digraph for the common independent set ``s`` and
        its complement ``c``.

        Costs ``|s| * |c|`` independence queries in each matroid for the edges
        plus ``|c|`` in each for the sources and sinks.
        """
        key_to_node = _key_to_node_map(s, c)
        graph = nx.DiGraph()
        for e in s:
            graph.add_node(key_to_node[e.key], element=e, in_set=True, cost=e.weight)
        for f in c:
            graph.add_node(key_to_node[f.key], element=f, in_set=False, cost=-f.weight)

        probe = s.clone()
        for e in s:
            for f in c:
                probe.swap(e, f)
                exchange = f.weight - e.weight
                if m1.independent(probe):
                    graph.add_edge(key_to_node[e.key], key_to_node[f.key], exchange=exchange, cost=-f.weight)
                if m2.independent(probe):
                    graph.add_edge(key_to_node[f.key], key_to_node[e.key], exchange=exchange, cost=e.weight)
                probe.swap(f, e)

        sources, sinks = set(), set()
        for f in c:
            probe.add(f)
            if m1.independent(probe):
                sources.add(key_to_node[f.key])
            if m2.independent(probe):
                sinks.add(key_to_node[f.key])
            probe.remove(f)

        return cls(graph, key_to_node, sources, sinks)

    def element(self, node: int) -> Element:
        return self.graph.nodes[node]["element"]

    def cost(self, node: int) -> float:
        return self.graph.nodes[node]["cost"]

    def path_cost(self, path: List[int]) -> float:
        return sum(self.cost(v) for v in path)

    def path_elements(self, path: List[int]) -> List[Element]:
        return [self.element(v) for v in path]

    def number_of_nodes(self) -> int:
        return self.graph.number_of_nodes()

    def number_of_edges(self) -> int:
        return self.graph.number_of_edges()


def _key_to_node_map(s: ElementSet, c: ElementSet) -> Dict[str, int]:
    m = {}
    for idx, e in enumerate(list(s) + list(c)):
        m[e.key] = idx
    return m


def _trace_path(parents: Dict[int, Optional[int]], target: int, limit: int) -> List[int]:
    path = [target]
    while parents[path[-1]] is not None:
        path.append(parents[path[-1]])
        if len(path) > limit:
            raise OracleInconsistencyError("predecessor chain does not terminate; exchange graph has a cycle")
    path.reverse()
    return path


def shortest_augmenting_path(graph: ExchangeGraph) -> Optional[List[int]]:
    """
    Finds a path from a source to a sink with the fewest edges.

    Breadth-first from all sources at once. A vertex that is both a source and
    a sink is a path by itself.

    Returns
    -------
    list[int] | None
        The vertices of the path, source first, or ``None`` if no sink is reachable.
    """
    parents: Dict[int, Optional[int]] = {}
    queue = deque()
    for v in sorted(graph.sources):
        parents[v] = None
        queue.append(v)

    while queue:
        u = queue.popleft()
        if u in graph.sinks:
            return _trace_path(parents, u, graph.number_of_nodes())
        for w in graph.graph.successors(u):
            if w not in parents:
                parents[w] = u
                queue.append(w)
    return None


def _improves(candidate: Tuple[float, int], current: Tuple[float, int], tolerance: float) -> bool:
    if candidate[0] < current[0] - tolerance:
        return True
    return abs(candidate[0] - current[0]) <= tolerance and candidate[1] < current[1]


def cheapest_augmenting_path(graph: ExchangeGraph, tolerance: float = None) -> Tuple[Optional[List[int]], float]:
    """
    Finds a minimum-cost source-to-sink path, and among those one with the
    fewest edges.

    Costs may be negative, so this is Bellman-Ford over ``(cost, hops)``
    labels; costs within ``tolerance`` of each other count as equal.

    Returns
    -------
    tuple
        ``(path, cost)``, or ``(None, inf)`` when no sink is reachable.

    Raises
    ------
    OracleInconsistencyError
        If the graph has a negative cycle, which cannot happen when the
        current set is weight-optimal for its size in two genuine matroids.
    """
    if tolerance is None:
        tolerance = config.WEIGHT_TOLERANCE
    if not graph.sources or not graph.sinks:
        return None, float("inf")

    labels: Dict[int, Tuple[float, int]] = {}
    parents: Dict[int, Optional[int]] = {}
    for v in sorted(graph.sources):
        labels[v] = (graph.cost(v), 0)
        parents[v] = None

    edges = sorted(graph.graph.edges(data="cost"))
    for _ in range(graph.number_of_nodes()):
        changed = False
        for u, w, edge_cost in edges:
            if u not in labels:
                continue
            cost, hops = labels[u]
            candidate = (cost + edge_cost, hops + 1)
            if w not in labels or _improves(candidate, labels[w], tolerance):
                labels[w] = candidate
                parents[w] = u
                changed = True
        if not changed:
            break
    else:
        raise OracleInconsistencyError("negative cycle in the exchange graph; oracle violates the matroid axioms?")

    best = None
    for v in sorted(graph.sinks):
        if v in labels and (best is None or _improves(labels[v], labels[best], tolerance)):
            best = v
    if best is None:
        return None, float("inf")
    return _trace_path(parents, best, graph.number_of_nodes()), labels[best][0]


def augment(s: ElementSet, graph: ExchangeGraph, path: List[int]) -> ElementSet:
    """Returns a copy of ``s`` with the membership of every vertex on ``path`` toggled."""
    augmented = s.clone()
    for e in graph.path_elements(path):
        if e in s:
            augmented.remove(e)
        else:
            augmented.add(e)
    return augmented


class MatroidIntersection:
    """
    Grows a common independent set of two matroids along augmenting paths.

    Each iteration rebuilds the exchange graph from scratch, searches it and
    toggles the path found. The loop ends when no useful path remains; it
    runs at most ``min(rank1, rank2)`` times.

    Attributes
    ----------
    m1, m2 : Matroid
        The two matroids, over equal ground sets.
    mode : Mode
        What is maximised, see ``Mode``.
    common : ElementSet
        The current common independent set.
    iterations : int
        Number of augmentations performed.
    history : list[dict]
        One record per augmentation: size, weight, path length and path cost.
    last_graph : ExchangeGraph | None
        The exchange graph searched in the last iteration.
    """
    def __init__(self, m1: Matroid, m2: Matroid, mode=None, tolerance: float = None):
        check_compatible(m1, m2)
        self.m1 = m1
        self.m2 = m2
        self.mode = Mode.parse(config.INTERSECTION_MODE if mode is None else mode)
        self.tolerance = config.WEIGHT_TOLERANCE if tolerance is None else tolerance
        self.ground = m1.ground_set()
        self.common = empty_set(self.ground.get_type())
        self.iterations = 0
        self.history: List[dict] = []
        self.last_graph: Optional[ExchangeGraph] = None

    def initial_set(self) -> ElementSet:
        """
        The set the search starts from.

        Weighted modes start empty, since each augmentation relies on the
        current set being the heaviest of its size. Cardinality mode starts
        from a greedy common independent set.
        """
        s = empty_set(self.ground.get_type())
        if self.mode.weighted:
            return s
        for e in self.ground:
            s.add(e)
            if not (self.m1.independent(s) and self.m2.independent(s)):
                s.remove(e)
        return s

    def build_graph(self) -> ExchangeGraph:
        c = self.ground.complement(self.common)
        return ExchangeGraph.build(self.common, c, self.m1, self.m2)

    def step(self) -> bool:
        """
        Performs one augmentation.

        Returns
        -------
        bool
            True if the set grew, False if it is already optimal for the mode.
        """
        graph = self.build_graph()
        self.last_graph = graph

        if self.mode.weighted:
            path, cost = cheapest_augmenting_path(graph, self.tolerance)
            if path is None:
                return False
            if self.mode is Mode.WEIGHT and cost >= -self.tolerance:
                logger.debug(f"cheapest path costs {cost:.6g}; no weight gain left")
                return False
        else:
            path = shortest_augmenting_path(graph)
            if path is None:
                return False
            cost = graph.path_cost(path)

        self.common = augment(self.common, graph, path)
        self.iterations += 1
        self.history.append(
            {
                "iteration": self.iterations,
                "size": self.common.cardinality(),
                "weight": self.common.weight(),
                "path_length": len(path) - 1,
                "path_cost": cost,
            }
        )
        logger.debug(
            f"iteration {self.iterations}: |V|={graph.number_of_nodes()} |E|={graph.number_of_edges()} "
            f"path={[e.key for e in graph.path_elements(path)]} cost={cost:.6g} size={self.common.cardinality()}"
        )
        return True

    @timer
    def run(self) -> ElementSet:
        """
        Runs the augmentation loop to completion.

        Returns
        -------
        ElementSet
            The final common independent set (a copy). Wrapped by ``timer``,
            so the call yields ``(set, elapsed_seconds)``.
        """
        self.common = self.initial_set()
        self.iterations = 0
        self.history = []
        while self.step():
            pass
        logger.info(
            f"intersection ({self.mode.value}) finished after {self.iterations} augmentations: "
            f"size={self.common.cardinality()} weight={self.common.weight():.6g}"
        )
        return self.common.clone()

    def has_augmenting_path(self) -> bool:
        """Whether any source-to-sink path exists for the current set."""
        return shortest_augmenting_path(self.build_graph()) is not None


def intersection(m1: Matroid, m2: Matroid, mode=None) -> ElementSet:
    """
    Computes an optimal common independent set of ``m1`` and ``m2``.

    Parameters
    ----------
    m1, m2 : Matroid
        Matroids over equal ground sets with the same type tag.
    mode : Mode | str, optional
        Defaults to ``config.INTERSECTION_MODE``.

    Raises
    ------
    GroundSetMismatchError
        Before any work, if the ground sets are incompatible.
    """
    common, elapsed = MatroidIntersection(m1, m2, mode).run()
    logger.debug(f"intersection took {elapsed:.3f} seconds")
    return common
