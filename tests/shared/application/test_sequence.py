"""Tests for sequential number allocation."""

import threading

import pytest
from protean.core.unit_of_work import UnitOfWork
from protean.utils.globals import current_domain

from storefront.shared.sequence import Counter


def _next(name):
    return current_domain.repository_for(Counter).next_value(name)


class TestSequence:
    def test_first_value_is_one(self):
        assert _next("orders") == 1

    def test_values_increase_by_one(self):
        first = _next("orders")
        second = _next("orders")
        assert second == first + 1

    def test_sequences_are_independent(self):
        _next("orders")
        _next("orders")
        assert _next("products") == 1

    def test_rolled_back_allocation_is_returned(self):
        with pytest.raises(RuntimeError):
            with UnitOfWork():
                _next("orders")
                raise RuntimeError("abort")

        assert _next("orders") == 1

    def test_allocations_in_one_unit_of_work_are_distinct(self):
        with UnitOfWork():
            values = [_next("orders") for _ in range(3)]
        assert values == [1, 2, 3]

    def test_concurrent_allocations_are_distinct(self, domain):
        allocated = []
        lock = threading.Lock()

        def allocate():
            with domain.domain_context():
                for _ in range(10):
                    value = _next("orders")
                    with lock:
                        allocated.append(value)

        threads = [threading.Thread(target=allocate) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(allocated) == list(range(1, 51))
