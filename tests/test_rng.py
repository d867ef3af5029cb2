"""
Tests for Seeded RNG
====================
Tests for the deterministic random source in conlangkit/generators/rng.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conlangkit.generators.rng import SeededRNG, LCG_MODULUS


class TestSequence:
    """Tests for the raw number stream."""

    def test_first_value_from_zero_seed(self):
        """Seed 0 steps straight to the increment."""
        rng = SeededRNG(0)
        assert rng.next() == 1013904223 / 2 ** 32

    def test_first_value_from_seed_one(self):
        rng = SeededRNG(1)
        assert rng.next() == (1664525 + 1013904223) / 2 ** 32

    def test_same_seed_same_sequence(self):
        a = SeededRNG(42)
        b = SeededRNG(42)
        assert [a.next() for _ in range(100)] == [b.next() for _ in range(100)]

    def test_different_seeds_differ(self):
        a = SeededRNG(1)
        b = SeededRNG(2)
        assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]

    def test_values_in_unit_interval(self):
        rng = SeededRNG(123)
        for _ in range(1000):
            value = rng.next()
            assert 0.0 <= value < 1.0

    def test_seed_is_masked_to_32_bits(self):
        assert SeededRNG(-1).seed == LCG_MODULUS - 1
        assert SeededRNG(LCG_MODULUS + 5).seed == 5


class TestNextInt:
    """Tests for integer draws."""

    def test_half_open_range(self):
        rng = SeededRNG(7)
        values = {rng.next_int(1, 4) for _ in range(500)}
        assert values == {1, 2, 3}

    def test_single_value_range(self):
        rng = SeededRNG(7)
        assert all(rng.next_int(5, 6) == 5 for _ in range(20))


class TestPick:
    """Tests for uniform and weighted selection."""

    def test_pick_empty_raises(self):
        with pytest.raises(IndexError):
            SeededRNG(1).pick([])

    def test_pick_returns_member(self):
        rng = SeededRNG(3)
        items = ['a', 'b', 'c']
        for _ in range(50):
            assert rng.pick(items) in items

    def test_pick_weighted_zero_total_returns_first(self):
        rng = SeededRNG(3)
        items = [{'v': 'x', 'weight': 0}, {'v': 'y', 'weight': 0}]
        assert rng.pick_weighted(items)['v'] == 'x'

    def test_pick_weighted_never_chooses_zero_weight(self):
        rng = SeededRNG(9)
        items = [{'v': 'never', 'weight': 0}, {'v': 'always', 'weight': 1}]
        for _ in range(200):
            assert rng.pick_weighted(items)['v'] == 'always'

    def test_pick_weighted_reads_attributes(self):
        from conlangkit.definition import SyllableTemplate

        rng = SeededRNG(9)
        templates = [SyllableTemplate('CV', 0), SyllableTemplate('CVC', 2)]
        assert rng.pick_weighted(templates).template == 'CVC'

    def test_pick_weighted_missing_weight_counts_as_one(self):
        rng = SeededRNG(11)
        items = [{'v': 'a'}, {'v': 'b'}]
        seen = {rng.pick_weighted(items)['v'] for _ in range(100)}
        assert seen == {'a', 'b'}

    def test_pick_weighted_is_proportional(self):
        rng = SeededRNG(5)
        items = [{'v': 'heavy', 'weight': 9}, {'v': 'light', 'weight': 1}]
        picks = [rng.pick_weighted(items)['v'] for _ in range(2000)]
        assert picks.count('heavy') > picks.count('light') * 4


class TestPickWithPreference:
    """Tests for style-biased selection."""

    def test_avoided_items_excluded(self):
        rng = SeededRNG(21)
        for _ in range(200):
            assert rng.pick_with_preference(['p', 't', 'k'], avoided=['k']) != 'k'

    def test_all_avoided_falls_back_to_full_set(self):
        rng = SeededRNG(21)
        seen = {rng.pick_with_preference(['p', 't'], avoided=['p', 't']) for _ in range(100)}
        assert seen == {'p', 't'}

    def test_preferred_items_favoured(self):
        rng = SeededRNG(8)
        picks = [rng.pick_with_preference(['a', 'b', 'c', 'd'], preferred=['a']) for _ in range(3000)]
        assert picks.count('a') > picks.count('b') * 1.5

    def test_no_preferences_behaves_like_pick(self):
        a = SeededRNG(99)
        b = SeededRNG(99)
        items = ['x', 'y', 'z']
        assert [a.pick_with_preference(items) for _ in range(20)] == [b.pick(items) for _ in range(20)]


class TestShuffle:
    """Tests for Fisher-Yates shuffle."""

    def test_input_not_mutated(self):
        items = [1, 2, 3, 4, 5]
        SeededRNG(4).shuffle(items)
        assert items == [1, 2, 3, 4, 5]

    def test_is_permutation(self):
        items = list(range(20))
        result = SeededRNG(4).shuffle(items)
        assert sorted(result) == items

    def test_deterministic(self):
        items = list('abcdefgh')
        assert SeededRNG(12).shuffle(items) == SeededRNG(12).shuffle(items)
