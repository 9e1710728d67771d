import numpy as np
from typing import Callable, List, Optional, Tuple

import config
from groundset import ElementSet
from matroid import RankMatroid


class Generator:
    """
    Abstract base class for random matroid instance generators.

    Each generator draws a weighted ground set and rank functions over it.
    Rank functions are wrapped in ``RankMatroid``; these are experiment
    instances, the algorithms never rely on their structure.
    """
    def __init__(self, num_elements: int, max_weight: int = 100, seed: Optional[int] = None,
                 set_type: str = config.DEFAULT_SET_TYPE):
        if num_elements <= 0:
            raise ValueError("Number of elements must be positive.")
        if max_weight <= 0:
            raise ValueError("Maximum weight must be positive.")
        self.num_elements = num_elements
        self.max_weight = max_weight
        self.set_type = set_type
        self.rng = np.random.default_rng(seed)

    def generate_ground_set(self) -> ElementSet:
        """Elements ``e0..e{n-1}`` with integer weights drawn uniformly from ``[1, max_weight]``."""
        weights = self.rng.integers(1, self.max_weight + 1, size=self.num_elements)
        return ElementSet.from_weights(
            {f"e{i}": float(w) for i, w in enumerate(weights)}, self.set_type
        )

    def generate_rank_function(self, ground: ElementSet) -> Callable[[ElementSet], int]:
        """Draws a rank function over ``ground``. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses should implement this method!")

    def generate_matroid(self, ground: Optional[ElementSet] = None) -> RankMatroid:
        if ground is None:
            ground = self.generate_ground_set()
        return RankMatroid(ground, self.generate_rank_function(ground), name=type(self).__name__)

    def generate_matroids(self, n: int) -> List[RankMatroid]:
        """Generates ``n`` matroids over one shared ground set."""
        if n <= 0:
            return []
        ground = self.generate_ground_set()
        return [self.generate_matroid(ground) for _ in range(n)]

    def generate_pair(self) -> Tuple[RankMatroid, RankMatroid]:
        m1, m2 = self.generate_matroids(2)
        return m1, m2


class UniformGenerator(Generator):
    """
    Uniform matroids: a set is independent iff it has at most ``rank`` elements.
    """
    def __init__(self, num_elements: int, rank: int, **kwargs):
        super().__init__(num_elements, **kwargs)
        if rank < 0:
            raise ValueError("Rank must be non-negative.")
        self.rank = rank

    def generate_rank_function(self, ground: ElementSet) -> Callable[[ElementSet], int]:
        r = self.rank
        return lambda s: min(s.cardinality(), r)


class PartitionGenerator(Generator):
    """
    Partition matroids: every element falls in one of ``num_blocks`` random
    blocks, and a set is independent iff it takes at most ``capacity``
    elements from each block. Each rank function gets its own partition.
    """
    def __init__(self, num_elements: int, num_blocks: int, capacity: int = 1, **kwargs):
        super().__init__(num_elements, **kwargs)
        if num_blocks <= 0:
            raise ValueError("Number of blocks must be positive.")
        if capacity < 0:
            raise ValueError("Capacity must be non-negative.")
        self.num_blocks = num_blocks
        self.capacity = capacity

    def generate_rank_function(self, ground: ElementSet) -> Callable[[ElementSet], int]:
        blocks = self.rng.integers(0, self.num_blocks, size=ground.cardinality())
        block_of = {key: int(b) for key, b in zip(ground.keys(), blocks)}
        k, capacity = self.num_blocks, self.capacity

        def rank(s: ElementSet) -> int:
            if not s.cardinality():
                return 0
            counts = np.bincount([block_of[key] for key in s.keys()], minlength=k)
            return int(np.minimum(counts, capacity).sum())

        return rank
