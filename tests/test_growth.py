"""
Tests for forward growth of growing tips.

These tests verify growth distance, the curviness random walk, bounds
handling and the growing-tip bookkeeping.
"""

import math

import jax.random as jr
import pytest

from tendril import graph, growth
from tendril.config import GamePowers, GameState, GrowthConfig, PlantNode
from tendril.environment import default_environment
from tendril.errors import InvalidTipReference, OutOfBounds

# No rate jitter makes growth deterministic
STEADY = GrowthConfig(curviness_rate_jitter=0.0)


def make_root(
    x: float = 0.0,
    y: float = 0.0,
    direction: float = 0.0,
    curviness: float = 0.0,
    curviness_rate: float = 0.0,
    thickness: float = 2.0,
) -> PlantNode:
    return PlantNode(
        id=0,
        x=x,
        y=y,
        parent_id=None,
        children=(),
        is_growing_tip=True,
        thickness=thickness,
        color="#4ade80",
        creation_turn=1,
        growth_direction=direction,
        curviness=curviness,
        curviness_rate=curviness_rate,
    )


def make_test_state(root: PlantNode | None = None, powers: GamePowers | None = None) -> GameState:
    """A turn-1 state holding a single root tip."""
    if root is None:
        root = make_root()
    return GameState(
        nodes=(root,),
        growing_tips=(0,),
        turn=1,
        powers=powers or GamePowers(),
        environment=default_environment(),
    )


class TestGrowthDistance:
    """Tests for the distance formula."""

    def test_base_distance(self) -> None:
        assert growth.growth_distance(GamePowers(), GrowthConfig()) == 1.5

    def test_growth_bonus(self) -> None:
        """Three growth points add 3 * 0.5."""
        assert growth.growth_distance(GamePowers(growth=3), GrowthConfig()) == 3.0

    def test_other_powers_ignored(self) -> None:
        powers = GamePowers(branchiness=4, resilience=2)
        assert growth.growth_distance(powers, GrowthConfig()) == 1.5


class TestCurvinessWalk:
    """Tests for the bounded random walk with momentum."""

    def test_rate_feeds_curviness(self) -> None:
        """Without jitter, curviness moves by exactly the rate."""
        curviness, rate = growth.drift_curviness(0.1, 0.01, jr.PRNGKey(0), STEADY)
        assert rate == pytest.approx(0.01, abs=1e-6)
        assert curviness == pytest.approx(0.11, abs=1e-6)

    def test_curviness_clamped(self) -> None:
        config = STEADY
        curviness, _ = growth.drift_curviness(
            config.max_curviness, config.max_curviness_rate, jr.PRNGKey(0), config
        )
        assert curviness == config.max_curviness

    def test_negative_curviness_clamped(self) -> None:
        config = STEADY
        curviness, _ = growth.drift_curviness(
            -config.max_curviness, -config.max_curviness_rate, jr.PRNGKey(0), config
        )
        assert curviness == -config.max_curviness

    def test_rate_perturbation_bounded(self) -> None:
        """The rate moves by at most the jitter per turn."""
        config = GrowthConfig()
        for seed in range(20):
            _, rate = growth.drift_curviness(0.0, 0.0, jr.PRNGKey(seed), config)
            assert abs(rate) <= config.curviness_rate_jitter

    def test_rate_clamped(self) -> None:
        config = GrowthConfig()
        for seed in range(20):
            _, rate = growth.drift_curviness(
                0.0, config.max_curviness_rate, jr.PRNGKey(seed), config
            )
            assert abs(rate) <= config.max_curviness_rate

    def test_saturated_walk_stays_inside(self) -> None:
        """Curviness pinned at the cap is stored exactly at the cap, not past it."""
        config = GrowthConfig()
        for seed in range(20):
            curviness, rate = growth.drift_curviness(
                0.26, 0.0174, jr.PRNGKey(seed), config
            )
            assert abs(curviness) <= config.max_curviness
            assert abs(rate) <= config.max_curviness_rate
        curviness, _ = growth.drift_curviness(0.26, 0.0174, jr.PRNGKey(0), config)
        assert curviness == config.max_curviness

    def test_same_key_same_draw(self) -> None:
        config = GrowthConfig()
        first = growth.drift_curviness(0.0, 0.0, jr.PRNGKey(3), config)
        second = growth.drift_curviness(0.0, 0.0, jr.PRNGKey(3), config)
        assert first == second


class TestGrowTips:
    """Tests for the bulk growth step."""

    def test_straight_growth(self) -> None:
        """A straight tip at the origin grows 1.5 units along its heading."""
        state = growth.grow_tips(make_test_state(), 2, jr.PRNGKey(0), STEADY)

        assert len(state.nodes) == 2
        child = state.nodes[1]
        assert child.x == pytest.approx(1.5, abs=1e-5)
        assert child.y == pytest.approx(0.0, abs=1e-5)
        assert child.parent_id == 0
        assert child.creation_turn == 2

    def test_heading_includes_curviness(self) -> None:
        root = make_root(direction=math.pi / 2, curviness=0.1)
        state = growth.grow_tips(make_test_state(root), 2, jr.PRNGKey(0), STEADY)

        child = state.nodes[1]
        assert child.growth_direction == pytest.approx(math.pi / 2 + 0.1, abs=1e-6)
        assert child.x == pytest.approx(1.5 * math.cos(math.pi / 2 + 0.1), abs=1e-5)
        assert child.y == pytest.approx(1.5 * math.sin(math.pi / 2 + 0.1), abs=1e-5)

    def test_tip_converted(self) -> None:
        state = growth.grow_tips(make_test_state(), 2, jr.PRNGKey(0))

        assert not state.nodes[0].is_growing_tip
        assert state.nodes[0].children == (1,)
        assert state.nodes[1].is_growing_tip
        assert state.growing_tips == (1,)
        assert graph.is_consistent(state)

    def test_child_thinner_than_parent(self) -> None:
        state = growth.grow_tips(make_test_state(), 2, jr.PRNGKey(0))
        assert state.nodes[1].thickness == pytest.approx(1.7)

    def test_thickness_floor(self) -> None:
        root = make_root(thickness=0.9)
        state = growth.grow_tips(make_test_state(root), 2, jr.PRNGKey(0))
        assert state.nodes[1].thickness == 0.8

    def test_child_inherits_color(self) -> None:
        root = make_root()._replace(color="#123456")
        state = growth.grow_tips(make_test_state(root), 2, jr.PRNGKey(0))
        assert state.nodes[1].color == "#123456"

    def test_growth_power_extends_distance(self) -> None:
        state = make_test_state(powers=GamePowers(growth=3))
        state = growth.grow_tips(state, 2, jr.PRNGKey(0), STEADY)
        assert state.nodes[1].x == pytest.approx(3.0, abs=1e-5)

    def test_saturated_tip_child_within_bounds(self) -> None:
        """A tip at both caps grows a child whose walk is still inside them."""
        config = GrowthConfig()
        for sign in (1.0, -1.0):
            root = make_root(
                curviness=sign * config.max_curviness,
                curviness_rate=sign * config.max_curviness_rate,
            )
            for seed in range(10):
                state = growth.grow_tips(make_test_state(root), 2, jr.PRNGKey(seed))
                child = state.nodes[1]
                assert abs(child.curviness) <= config.max_curviness
                assert abs(child.curviness_rate) <= config.max_curviness_rate
                # the rate only drifts by the jitter, so curviness stays pinned
                assert child.curviness == sign * config.max_curviness

    def test_out_of_bounds_tip_waits(self) -> None:
        """A tip whose next position is outside the field stays unchanged."""
        root = make_root(x=99.5, y=0.0)
        before = make_test_state(root)
        after = growth.grow_tips(before, 2, jr.PRNGKey(0), STEADY)

        assert after.nodes == before.nodes
        assert after.growing_tips == (0,)

    def test_stale_tip_skipped(self) -> None:
        """Ids that are missing or no longer tips are ignored."""
        state = make_test_state()._replace(growing_tips=(0, 42))
        state = growth.grow_tips(state, 2, jr.PRNGKey(0))
        assert len(state.nodes) == 2

    def test_every_tip_grows(self) -> None:
        state = make_test_state()
        for turn in range(2, 6):
            state = growth.grow_tips(state, turn, jr.PRNGKey(turn))
        assert len(state.nodes) == 5
        assert state.growing_tips == (4,)
        assert graph.is_consistent(state)

    def test_input_state_unchanged(self) -> None:
        before = make_test_state()
        growth.grow_tips(before, 2, jr.PRNGKey(0))
        assert before.nodes[0].is_growing_tip
        assert len(before.nodes) == 1


class TestGrowTip:
    """Tests for directed single-tip growth."""

    def test_grows_named_tip(self) -> None:
        state = growth.grow_tip(make_test_state(), 0, jr.PRNGKey(0), STEADY)
        assert len(state.nodes) == 2
        assert state.growing_tips == (1,)
        assert state.nodes[1].creation_turn == 1

    def test_unknown_tip(self) -> None:
        with pytest.raises(InvalidTipReference, match="does not exist"):
            growth.grow_tip(make_test_state(), 5, jr.PRNGKey(0))

    def test_converted_tip(self) -> None:
        state = growth.grow_tip(make_test_state(), 0, jr.PRNGKey(0))
        with pytest.raises(InvalidTipReference, match="no longer a growing tip"):
            growth.grow_tip(state, 0, jr.PRNGKey(1))

    def test_out_of_bounds(self) -> None:
        before = make_test_state(make_root(x=99.5))
        with pytest.raises(OutOfBounds):
            growth.grow_tip(before, 0, jr.PRNGKey(0), STEADY)
        assert before.nodes[0].is_growing_tip
        assert before.growing_tips == (0,)
