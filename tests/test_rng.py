"""Unit tests for the seeded random source."""

from src.segdoku.rng import RNG, LcgRNG, create_rng


class FixedSequenceRNG(RNG):
    """Replays a fixed list of raw draws, wrapped into the requested range."""

    def __init__(self, values):
        super().__init__(seed=0)
        self.values = list(values)
        self.position = 0

    def next(self, lower, upper):
        if upper <= lower:
            return lower
        value = self.values[self.position % len(self.values)]
        self.position += 1
        return lower + value % (upper - lower + 1)


def test_lcg_first_draw_matches_reference_constants():
    rng = LcgRNG(0)
    assert rng.next(0, 9) == 1013904223 % 10
    assert rng.state == 1013904223


def test_same_seed_same_sequence():
    a = create_rng(1234)
    b = create_rng(1234)
    assert [a.next(0, 100) for _ in range(50)] == [b.next(0, 100) for _ in range(50)]


def test_draws_stay_in_inclusive_range():
    rng = create_rng(7)
    draws = [rng.next(3, 6) for _ in range(200)]
    assert set(draws) <= {3, 4, 5, 6}
    assert len(set(draws)) > 1


def test_empty_range_returns_lower_without_consuming_state():
    rng = LcgRNG(99)
    assert rng.next(4, 4) == 4
    assert rng.next(5, 2) == 5
    assert rng.state == 99


def test_get_next_single_argument_means_zero_to_upper():
    a = create_rng(5)
    b = create_rng(5)
    assert a.get_next(10) == b.next(0, 10)


def test_pick_uses_one_draw_over_the_indices():
    rng = FixedSequenceRNG([2])
    assert rng.pick(["x", "y", "z"]) == "z"


def test_shuffle_walks_from_the_end_and_leaves_input_alone():
    items = ["a", "b", "c", "d"]
    rng = FixedSequenceRNG([0])
    assert rng.shuffle(items) == ["b", "c", "d", "a"]
    assert items == ["a", "b", "c", "d"]


def test_shuffle_is_a_permutation():
    rng = create_rng(11)
    shuffled = rng.shuffle(range(20))
    assert sorted(shuffled) == list(range(20))
