"""Tests for comparison panels and the frame sequencer."""

import pandas as pd
import pytest

from layout_tour.errors import MissingCoordinateError, ValidationError
from layout_tour.frames import (
    AnimationSettings,
    EASINGS,
    animation_order,
    comparison_panels,
    data_extent,
    padded_extent,
    sequence_frames,
)


# =============================================================================
# Static comparison
# =============================================================================


class TestComparisonPanels:

    def test_one_panel_per_layout(self, tiny_nodes, tiny_edges):
        panels = comparison_panels(tiny_nodes, tiny_edges)
        assert [p.layout for p in panels] == ["circle", "star"]
        for panel in panels:
            assert set(panel.nodes["layout"]) == {panel.layout}
            assert set(panel.edges["layout"]) == {panel.layout}
            assert len(panel.nodes) == 3
            assert len(panel.edges) == 2

    def test_panels_keep_their_own_extent(self, tiny_nodes, tiny_edges):
        circle, star = comparison_panels(tiny_nodes, tiny_edges)
        assert circle.extent != star.extent
        assert circle.extent == data_extent(circle.nodes, circle.edges)
        assert star.extent == data_extent(star.nodes, star.edges)


class TestExtent:

    def test_extent_covers_edges(self):
        nodes = pd.DataFrame({"x": [0.0, 1.0], "y": [0.0, 2.0]})
        edges = pd.DataFrame({"x": [-1.0], "y": [0.0], "xend": [1.0], "yend": [3.0]})
        assert data_extent(nodes) == (0.0, 1.0, 0.0, 2.0)
        assert data_extent(nodes, edges) == (-1.0, 1.0, 0.0, 3.0)

    def test_padding(self):
        assert padded_extent((0.0, 10.0, 0.0, 2.0), 0.1) == pytest.approx((-1.0, 11.0, -0.2, 2.2))

    def test_zero_span_still_gets_a_window(self):
        xmin, xmax, ymin, ymax = padded_extent((1.0, 1.0, 0.0, 0.0), 0.1)
        assert xmin < 1.0 < xmax
        assert ymin < 0.0 < ymax


# =============================================================================
# Settings
# =============================================================================


class TestAnimationSettings:

    def test_frame_counts(self, quick_settings):
        assert quick_settings.hold_frames == 2
        assert quick_settings.transition_frames == 3
        assert quick_settings.frame_duration == 500.0

    def test_hold_is_at_least_one_frame(self):
        assert AnimationSettings(fps=10, state_length=0).hold_frames == 1

    def test_rejects_bad_values(self):
        with pytest.raises(ValidationError):
            AnimationSettings(fps=0)
        with pytest.raises(ValidationError):
            AnimationSettings(transition_length=-1)
        with pytest.raises(ValidationError, match="easing"):
            AnimationSettings(ease="bounce")

    def test_easings_hit_the_ends(self):
        for ease in EASINGS.values():
            assert ease(0.0) == pytest.approx(0.0)
            assert ease(1.0) == pytest.approx(1.0)
        assert EASINGS["cubic-in-out"](0.5) == pytest.approx(0.5)


# =============================================================================
# Animation order
# =============================================================================


class TestAnimationOrder:

    def test_curated_not_alphabetical(self):
        assert animation_order(["star", "circle", "kk"]) == ["circle", "kk", "star"]

    def test_uncurated_layouts_follow(self):
        assert animation_order(["custom", "tree", "circle"], order=["tree"]) == ["tree", "circle", "custom"]


# =============================================================================
# Frame sequence
# =============================================================================


class TestSequenceFrames:

    def test_frame_count_with_wrap(self, tiny_nodes, tiny_edges, quick_settings):
        sequence = sequence_frames(tiny_nodes, tiny_edges, settings=quick_settings)
        # 2 layouts x (2 hold + 3 transition)
        assert len(sequence) == 10
        assert sequence.order == ["circle", "star"]
        assert sequence.frames["phase"].tolist() == ["hold"] * 2 + ["transition"] * 3 + ["hold"] * 2 + ["transition"] * 3
        assert sequence.frames["next_state"].iloc[-1] == "circle"

    def test_frame_count_without_wrap(self, tiny_nodes, tiny_edges):
        settings = AnimationSettings(fps=2, state_length=1.0, transition_length=1.5, wrap=False)
        sequence = sequence_frames(tiny_nodes, tiny_edges, settings=settings)
        assert len(sequence) == 7
        assert sequence.frames["state"].iloc[-1] == "star"

    def test_every_frame_has_all_nodes_and_edges(self, tiny_nodes, tiny_edges, quick_settings):
        sequence = sequence_frames(tiny_nodes, tiny_edges, settings=quick_settings)
        assert (sequence.nodes.groupby("frame").size() == 3).all()
        assert (sequence.edges.groupby("frame").size() == 2).all()
        assert set(sequence.edges["edge_id"]) == {"1-2", "2-3"}

    def test_hold_frames_use_exact_coordinates(self, tiny_nodes, tiny_edges, quick_settings):
        sequence = sequence_frames(tiny_nodes, tiny_edges, settings=quick_settings)
        hold = sequence.frames[(sequence.frames["phase"] == "hold") & (sequence.frames["state"] == "star")]
        _, nodes, edges = sequence.frame(int(hold["frame"].iloc[0]))

        star = tiny_nodes[tiny_nodes["layout"] == "star"].set_index("name")
        got = nodes.set_index("name")
        pd.testing.assert_frame_equal(got[["x", "y"]], star.loc[got.index, ["x", "y"]])

        star_edges = tiny_edges[tiny_edges["layout"] == "star"].set_index("edge_id")
        got_edges = edges.set_index("edge_id")
        pd.testing.assert_frame_equal(got_edges[["x", "y", "xend", "yend"]],
                                      star_edges.loc[got_edges.index, ["x", "y", "xend", "yend"]])

    def test_linear_transition_midpoint(self, tiny_nodes, tiny_edges):
        settings = AnimationSettings(fps=2, state_length=0.5, transition_length=0.5, ease="linear")
        sequence = sequence_frames(tiny_nodes, tiny_edges, settings=settings)
        middle = sequence.frames[sequence.frames["phase"] == "transition"].iloc[0]
        assert middle["progress"] == pytest.approx(0.5)
        assert middle["title"] == "star"

        _, nodes, edges = sequence.frame(int(middle["frame"]))
        circle = tiny_nodes[tiny_nodes["layout"] == "circle"].set_index("name")[["x", "y"]]
        star = tiny_nodes[tiny_nodes["layout"] == "star"].set_index("name")[["x", "y"]]
        expected = (circle + star) / 2
        got = nodes.set_index("name")[["x", "y"]]
        pd.testing.assert_frame_equal(got, expected.loc[got.index])

        e_circle = tiny_edges[tiny_edges["layout"] == "circle"].set_index("edge_id")[["x", "y", "xend", "yend"]]
        e_star = tiny_edges[tiny_edges["layout"] == "star"].set_index("edge_id")[["x", "y", "xend", "yend"]]
        got_edges = edges.set_index("edge_id")[["x", "y", "xend", "yend"]]
        pd.testing.assert_frame_equal(got_edges, ((e_circle + e_star) / 2).loc[got_edges.index])

    def test_title_switches_to_closest_layout(self, tiny_nodes, tiny_edges):
        settings = AnimationSettings(fps=3, state_length=1 / 3, transition_length=1.0, wrap=False)
        sequence = sequence_frames(tiny_nodes, tiny_edges, settings=settings)
        transition = sequence.frames[sequence.frames["phase"] == "transition"]
        assert transition["progress"].tolist() == pytest.approx([0.25, 0.5, 0.75])
        assert transition["title"].tolist() == ["circle", "star", "star"]

    def test_viewport_follows_active_layout(self, tiny_nodes, tiny_edges, quick_settings):
        sequence = sequence_frames(tiny_nodes, tiny_edges, settings=quick_settings)
        frames = sequence.frames.set_index("frame")
        view = ["xmin", "xmax", "ymin", "ymax"]
        for panel_layout, first in (("circle", 0), ("star", 5)):
            part_nodes = tiny_nodes[tiny_nodes["layout"] == panel_layout]
            part_edges = tiny_edges[tiny_edges["layout"] == panel_layout]
            expected = padded_extent(data_extent(part_nodes, part_edges), quick_settings.padding)
            assert tuple(frames.loc[first, view]) == pytest.approx(expected)
        assert tuple(frames.loc[0, view]) != pytest.approx(tuple(frames.loc[5, view]))

    def test_explicit_order(self, tiny_nodes, tiny_edges, quick_settings):
        sequence = sequence_frames(tiny_nodes, tiny_edges, order=["star", "circle"], settings=quick_settings)
        assert sequence.frames["state"].iloc[0] == "star"

    def test_order_with_unknown_layout(self, tiny_nodes, tiny_edges):
        with pytest.raises(ValidationError, match="kk"):
            sequence_frames(tiny_nodes, tiny_edges, order=["circle", "kk"])

    def test_single_layout_only_holds(self, tiny_nodes, tiny_edges, quick_settings):
        sequence = sequence_frames(tiny_nodes, tiny_edges, order=["circle"], settings=quick_settings)
        assert len(sequence) == 2
        assert set(sequence.frames["phase"]) == {"hold"}

    def test_node_missing_from_next_layout(self, tiny_nodes, tiny_edges):
        broken = tiny_nodes[~((tiny_nodes["name"] == 3) & (tiny_nodes["layout"] == "star"))]
        with pytest.raises(MissingCoordinateError) as err:
            sequence_frames(broken, tiny_edges)
        assert (err.value.node, err.value.layout) == (3, "star")

    def test_edge_missing_from_next_layout(self, tiny_nodes, tiny_edges):
        broken = tiny_edges[~((tiny_edges["edge_id"] == "1-2") & (tiny_edges["layout"] == "star"))]
        with pytest.raises(MissingCoordinateError) as err:
            sequence_frames(tiny_nodes, broken)
        assert (err.value.edge, err.value.layout) == ("1-2", "star")
