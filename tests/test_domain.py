"""Tests for pipewave.domain module."""

import random
from collections import Counter

import pytest

from pipewave.domain import CellDomain, ContradictionError, DomainState
from pipewave.tiles import TileState, all_tiles, tiles_to_mask


class TestConstruction:
    """Tests for creating cells."""

    def test_default_is_full_undetermined(self):
        domain = CellDomain()

        assert domain.state == DomainState.UNDETERMINED
        assert domain.is_undetermined
        assert domain.tiles() == all_tiles()
        assert domain.tile is None

    def test_fixed(self):
        domain = CellDomain.fixed(TileState.LR)

        assert domain.is_fixed
        assert domain.tile == TileState.LR
        assert domain.tiles() == [TileState.LR]

    def test_contradiction(self):
        domain = CellDomain.contradiction()

        assert domain.is_contradiction
        assert domain.tile is None
        assert domain.tiles() == []

    def test_undetermined_subset(self):
        domain = CellDomain.undetermined([TileState.BT, TileState.EMPTY])

        assert domain.is_undetermined
        assert domain.tiles() == [TileState.EMPTY, TileState.BT]

    def test_undetermined_without_tiles_is_contradiction(self):
        domain = CellDomain.undetermined([])

        assert domain.is_contradiction
        assert domain == CellDomain.contradiction()

    def test_undetermined_single_tile_is_fixed(self):
        domain = CellDomain.undetermined([TileState.LR])

        assert domain.is_fixed
        assert domain.tile == TileState.LR
        assert domain == CellDomain.fixed(TileState.LR)


class TestUncertainty:
    """Tests for CellDomain.uncertainty."""

    def test_full(self):
        assert CellDomain().uncertainty() == 12

    def test_fixed_is_zero(self):
        assert CellDomain.fixed(TileState.BLTR).uncertainty() == 0

    def test_subset(self):
        assert CellDomain.undetermined([TileState.BL, TileState.BR]).uncertainty() == 2

    def test_contradiction_raises(self):
        with pytest.raises(ContradictionError):
            CellDomain.contradiction().uncertainty()


class TestCollapse:
    """Tests for CellDomain.collapse."""

    def test_collapse_fixes_to_a_candidate(self, rng):
        candidates = [TileState.BL, TileState.LT, TileState.TR]
        domain = CellDomain.undetermined(candidates)

        domain.collapse(rng)

        assert domain.is_fixed
        assert domain.tile in candidates

    def test_collapse_fixed_is_noop(self, rng):
        domain = CellDomain.fixed(TileState.BT)
        domain.collapse(rng)
        assert domain == CellDomain.fixed(TileState.BT)

    def test_collapse_contradiction_is_noop(self, rng):
        domain = CellDomain.contradiction()
        domain.collapse(rng)
        assert domain.is_contradiction

    def test_collapse_empty_becomes_contradiction(self, rng):
        domain = CellDomain()
        domain.candidates = tiles_to_mask([])
        domain.collapse(rng)
        assert domain.is_contradiction

    def test_collapse_is_weighted(self):
        """EMPTY (weight 5) is drawn far more often than BLTR (weight 1)."""
        rng = random.Random(42)
        counts: Counter[TileState] = Counter()
        for _ in range(600):
            domain = CellDomain.undetermined([TileState.EMPTY, TileState.BLTR])
            domain.collapse(rng)
            counts[domain.tile] += 1

        assert counts[TileState.EMPTY] + counts[TileState.BLTR] == 600
        assert counts[TileState.EMPTY] > 2 * counts[TileState.BLTR]

    def test_collapse_is_deterministic_for_seed(self):
        first = CellDomain()
        second = CellDomain()
        first.collapse(random.Random(7))
        second.collapse(random.Random(7))
        assert first == second


class TestRestrict:
    """Tests for CellDomain.restrict."""

    def test_narrows_candidates(self):
        domain = CellDomain()
        changed = domain.restrict(tiles_to_mask([TileState.BL, TileState.BR, TileState.LR]))

        assert changed
        assert domain.is_undetermined
        assert domain.tiles() == [TileState.BL, TileState.BR, TileState.LR]

    def test_singleton_becomes_fixed(self):
        domain = CellDomain()
        assert domain.restrict(tiles_to_mask([TileState.TR]))
        assert domain == CellDomain.fixed(TileState.TR)

    def test_empty_becomes_contradiction(self):
        domain = CellDomain.undetermined([TileState.BL, TileState.BR])
        assert domain.restrict(tiles_to_mask([TileState.LR]))
        assert domain.is_contradiction

    def test_no_change(self):
        domain = CellDomain.undetermined([TileState.BL, TileState.BR])
        assert not domain.restrict(tiles_to_mask(all_tiles()))
        assert domain.tiles() == [TileState.BL, TileState.BR]

    def test_fixed_allowed_is_unchanged(self):
        domain = CellDomain.fixed(TileState.BT)
        assert not domain.restrict(tiles_to_mask([TileState.BT, TileState.LR]))
        assert domain.tile == TileState.BT

    def test_fixed_not_allowed_becomes_contradiction(self):
        domain = CellDomain.fixed(TileState.BT)
        assert domain.restrict(tiles_to_mask([TileState.LR]))
        assert domain.is_contradiction

    def test_wrong_mask_length(self):
        with pytest.raises(ValueError):
            CellDomain().restrict(tiles_to_mask([TileState.BT])[:5])


class TestEqualityAndCopy:
    """Tests for equality, copy and repr."""

    def test_copy_is_independent(self):
        domain = CellDomain()
        clone = domain.copy()
        clone.restrict(tiles_to_mask([TileState.BL, TileState.LR]))

        assert domain.uncertainty() == 12
        assert clone.uncertainty() == 2
        assert domain != clone

    def test_states_are_distinguished(self):
        both = [TileState.LR, TileState.BT]
        assert CellDomain.contradiction() != CellDomain.undetermined(both)
        assert CellDomain.fixed(TileState.LR) != CellDomain.undetermined(both)
        assert CellDomain.fixed(TileState.LR) != CellDomain.fixed(TileState.BT)

    def test_repr(self):
        assert repr(CellDomain.fixed(TileState.LR)) == "CellDomain.fixed(<TileState.LR: 9>)"
        assert repr(CellDomain.contradiction()) == "CellDomain.contradiction()"


class TestContradictionError:
    """Tests for ContradictionError."""

    def test_position(self):
        error = ContradictionError((2, 3))
        assert error.position == (2, 3)
        assert str(error) == "no tile fits cell (2, 3)"

    def test_without_position(self):
        error = ContradictionError()
        assert error.position is None
        assert str(error) == "no tile fits a cell"
