"""Id remapping: sequential, injective, counter threaded explicitly."""

import pytest

from pdfer.graph import ObjectId, remap_fresh, remap_ids


def ids(*numbers):
    return [ObjectId(n, 0) for n in numbers]


class TestRemapIds:
    def test_sequential_from_start_in_ascending_order(self):
        table, next_id = remap_ids(ids(7, 3, 12), start=5)

        assert table == {
            ObjectId(3, 0): ObjectId(5, 0),
            ObjectId(7, 0): ObjectId(6, 0),
            ObjectId(12, 0): ObjectId(7, 0),
        }
        assert next_id == 8

    def test_generation_is_reset_to_zero(self):
        table, _ = remap_ids([ObjectId(4, 2)], start=1)

        assert table[ObjectId(4, 2)] == ObjectId(1, 0)

    def test_duplicates_collapse(self):
        table, next_id = remap_ids(ids(2, 2, 9), start=1)

        assert len(table) == 2
        assert next_id == 3

    def test_empty_input_keeps_counter(self):
        table, next_id = remap_ids([], start=11)

        assert table == {}
        assert next_id == 11

    def test_start_below_one_rejected(self):
        with pytest.raises(ValueError):
            remap_ids(ids(1), start=0)


class TestCounterDisciplines:
    def test_global_sequential_ranges_are_disjoint(self):
        """Same source ids in two graphs still land on distinct targets."""
        first, next_id = remap_ids(ids(1, 2, 3, 4), start=1)
        second, next_id = remap_ids(ids(1, 2, 3), start=next_id)

        targets = list(first.values()) + list(second.values())
        assert len(targets) == len(set(targets))
        assert max(t.number for t in targets) == next_id - 1 == 7

    def test_local_fresh_restarts_at_one(self):
        first, _ = remap_fresh(ids(40, 41))
        second, _ = remap_fresh(ids(90))

        assert sorted(t.number for t in first.values()) == [1, 2]
        assert list(second.values()) == [ObjectId(1, 0)]
