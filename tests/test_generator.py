"""Tests for the random instance generators."""

import pytest

from conftest import subsets
from groundset import ElementSet
from utils.generator import Generator, PartitionGenerator, UniformGenerator


def test_invalid_arguments():
    with pytest.raises(ValueError):
        UniformGenerator(0, 1)
    with pytest.raises(ValueError):
        UniformGenerator(4, -1)
    with pytest.raises(ValueError):
        PartitionGenerator(4, 0)
    with pytest.raises(ValueError):
        PartitionGenerator(4, 2, max_weight=0)


def test_base_class_is_abstract():
    with pytest.raises(NotImplementedError):
        Generator(3).generate_matroid()


def test_ground_set_is_reproducible():
    g1 = UniformGenerator(5, 2, seed=7).generate_ground_set()
    g2 = UniformGenerator(5, 2, seed=7).generate_ground_set()
    assert g1.keys() == ["e0", "e1", "e2", "e3", "e4"]
    assert [e.weight for e in g1] == [e.weight for e in g2]
    assert all(1 <= e.weight <= 100 for e in g1)


def test_uniform_rank():
    m = UniformGenerator(5, 2, seed=1).generate_matroid()
    for s in subsets(m.ground_set()):
        assert m.rank(s) == min(s.cardinality(), 2)


def test_partition_rank_is_bounded_by_blocks():
    m = PartitionGenerator(6, 2, capacity=2, seed=3).generate_matroid()
    g = m.ground_set()
    assert m.rank(ElementSet(g.get_type())) == 0
    assert m.rank(g) <= 4
    for s in subsets(g):
        assert m.rank(s) <= s.cardinality()


def test_pair_shares_ground_set():
    m1, m2 = PartitionGenerator(5, 2, seed=11).generate_pair()
    assert m1.ground_set() is m2.ground_set()
    assert UniformGenerator(3, 1).generate_matroids(0) == []


def test_set_type_is_propagated():
    m = UniformGenerator(3, 1, set_type="edges").generate_matroid()
    assert m.ground_set().get_type() == "edges"
    assert all(e.set_type == "edges" for e in m.ground_set())
