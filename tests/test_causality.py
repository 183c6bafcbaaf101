"""Tests for the causality analyzer."""

import itertools

import pytest

from common.causality import (
    compare,
    happened_after,
    happened_before,
    is_concurrent_with,
    relation,
)
from common.vector_clock import VectorClock


def all_snapshots(keys=('A', 'B', 'C'), max_value=2):
    """Every snapshot over ``keys`` with counters in 0..max_value."""
    for values in itertools.product(range(max_value + 1), repeat=len(keys)):
        yield dict(zip(keys, values))


class TestHappenedBefore:

    def test_strictly_smaller_component(self):
        assert happened_before({'A': 1, 'B': 0}, {'A': 1, 'B': 1})

    def test_greater_component_breaks_precedence(self):
        assert not happened_before({'A': 2, 'B': 0}, {'A': 1, 'B': 1})

    def test_irreflexive(self):
        for snapshot in all_snapshots():
            assert not happened_before(snapshot, snapshot)

    def test_empty_intersection_is_not_before(self):
        assert not happened_before({'A': 0}, {'B': 5})
        assert not happened_before({}, {'A': 1})

    def test_missing_keys_are_excluded_not_zero(self):
        # As zeros, {'A':1} vs {'A':1,'B':1} would be before; only A is compared here
        assert not happened_before({'A': 1}, {'A': 1, 'B': 1})
        assert happened_before({'A': 0, 'C': 9}, {'A': 1, 'B': 0})

    def test_happened_after_is_inverse(self):
        a, b = {'A': 1, 'B': 0}, {'A': 1, 'B': 1}
        assert happened_after(b, a)
        assert not happened_after(a, b)


class TestConcurrency:

    def test_independent_increments_are_concurrent(self, p1, p2):
        a = p1.increment()
        b = p2.increment()
        assert a == {'P1': 1, 'P2': 0}
        assert b == {'P1': 0, 'P2': 1}
        assert is_concurrent_with(a, b)
        assert is_concurrent_with(b, a)

    def test_identical_snapshots_are_concurrent(self):
        assert is_concurrent_with({'A': 1}, {'A': 1})
        assert compare({'A': 1}, {'A': 1}) == 0

    def test_exactly_one_relation_holds(self):
        for a, b in itertools.product(list(all_snapshots()), repeat=2):
            verdicts = [happened_before(a, b), happened_before(b, a), is_concurrent_with(a, b)]
            assert verdicts.count(True) == 1, (a, b)


class TestCompare:

    @pytest.mark.parametrize('a, b, expected, name', [
        ({'A': 0, 'B': 0}, {'A': 1, 'B': 0}, -1, 'before'),
        ({'A': 2, 'B': 1}, {'A': 1, 'B': 1}, 1, 'after'),
        ({'A': 1, 'B': 0}, {'A': 0, 'B': 1}, 0, 'concurrent'),
    ])
    def test_compare_and_relation(self, a, b, expected, name):
        assert compare(a, b) == expected
        assert relation(a, b) == name

    def test_compare_reports_after_for_receive(self):
        client = VectorClock('Client', ['Client', 'Server1'])
        server = VectorClock('Server1', ['Client', 'Server1'])
        sent = client.increment()
        received = server.merge(sent)
        assert compare(received, sent) == 1
        assert relation(sent, received) == 'before'

    def test_mismatched_rosters(self):
        server_view = {'Client': 2, 'Server1': 3}
        client_view = {'Client': 1, 'Server1': 1, 'Server2': 4}
        assert compare(client_view, server_view) == -1
