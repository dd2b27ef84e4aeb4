"""
Tests for length-proportional thickening.
"""

import pytest

from tendril import thickening
from tendril.config import GamePowers, GameState, GrowthConfig, PlantNode
from tendril.environment import default_environment


def make_node(
    node_id: int,
    x: float,
    y: float,
    parent_id: int | None,
    thickness: float,
    is_growing_tip: bool = False,
) -> PlantNode:
    return PlantNode(
        id=node_id,
        x=x,
        y=y,
        parent_id=parent_id,
        children=(),
        is_growing_tip=is_growing_tip,
        thickness=thickness,
        color="#4ade80",
        creation_turn=1,
        growth_direction=0.0,
        curviness=0.0,
        curviness_rate=0.0,
    )


def make_test_state(resilience: int = 0) -> GameState:
    """Root at the origin and one tip 5 units away."""
    nodes = (
        make_node(0, 0.0, 0.0, None, 2.0)._replace(children=(1,)),
        make_node(1, 3.0, 4.0, 0, 1.7, is_growing_tip=True),
    )
    return GameState(
        nodes=nodes,
        growing_tips=(1,),
        turn=2,
        powers=GamePowers(resilience=resilience),
        environment=default_environment(),
    )


class TestResilienceFactor:
    """Tests for the thickening factor."""

    def test_base_factor(self) -> None:
        assert thickening.resilience_factor(GamePowers(), GrowthConfig()) == 0.02

    def test_resilience_bonus(self) -> None:
        factor = thickening.resilience_factor(GamePowers(resilience=3), GrowthConfig())
        assert factor == pytest.approx(0.05)


class TestThicken:
    """Tests for the thickening step."""

    def test_budget(self) -> None:
        """Budget = total length * factor."""
        state = make_test_state()
        budget = thickening.thickening_budget(state, GrowthConfig())
        assert budget == pytest.approx(5.0 * 0.02, abs=1e-6)

    def test_even_split(self) -> None:
        """Every node, root and tip alike, gets budget / node count."""
        state = thickening.thicken(make_test_state())
        assert state.nodes[0].thickness == pytest.approx(2.0 + 0.05, abs=1e-5)
        assert state.nodes[1].thickness == pytest.approx(1.7 + 0.05, abs=1e-5)

    def test_resilience_thickens_faster(self) -> None:
        state = thickening.thicken(make_test_state(resilience=2))
        # factor 0.04, budget 0.2, two nodes
        assert state.nodes[0].thickness == pytest.approx(2.1, abs=1e-5)

    def test_thickness_keeps_full_precision(self) -> None:
        """Each node gains exactly the increment in double precision."""
        before = make_test_state()
        increment = thickening.thickening_budget(before, GrowthConfig()) / 2
        after = thickening.thicken(before)
        for old, new in zip(before.nodes, after.nodes):
            assert new.thickness == old.thickness + increment

    def test_repeated_thickening_accumulates_exactly(self) -> None:
        state = make_test_state()
        expected = [node.thickness for node in state.nodes]
        for _ in range(50):
            increment = thickening.thickening_budget(state, GrowthConfig()) / 2
            expected = [value + increment for value in expected]
            state = thickening.thicken(state)
        assert [node.thickness for node in state.nodes] == expected

    def test_root_only_unchanged(self) -> None:
        """A plant with no segments has no budget."""
        state = make_test_state()
        root = state.nodes[0]._replace(children=())
        state = state._replace(nodes=(root,), growing_tips=())
        assert thickening.thicken(state).nodes[0].thickness == pytest.approx(2.0)

    def test_only_thickness_changes(self) -> None:
        before = make_test_state()
        after = thickening.thicken(before)
        for old, new in zip(before.nodes, after.nodes):
            assert new._replace(thickness=old.thickness) == old
        assert after.growing_tips == before.growing_tips

    def test_empty_state(self) -> None:
        state = GameState.empty(default_environment())
        assert thickening.thicken(state) == state
