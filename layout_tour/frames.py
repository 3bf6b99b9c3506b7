"""
Turns the unified node/edge tables into comparison panels or an animation.

Animation follows a state/transition scheme: each layout is held for
`state_length` seconds, then nodes (matched by name) and edges (matched by
edge_id) glide to the next layout over `transition_length` seconds. The
viewport of every frame is fitted to that frame's own data, so the view
follows the active layout.
"""

import logging
from dataclasses import dataclass, field

import pandas as pd

from layout_tour.config import (
    ANIMATION_ORDER,
    FPS,
    STATE_LENGTH,
    TRANSITION_LENGTH,
    VIEW_PADDING,
)
from layout_tour.errors import MissingCoordinateError, ValidationError
from layout_tour.unify import layout_order, observed_layouts

logger = logging.getLogger(__name__)


def _linear(t):
    return t


def _cubic_in_out(t):
    if t < 0.5:
        return 4 * t ** 3
    return 1 - (-2 * t + 2) ** 3 / 2


EASINGS = {
    "linear": _linear,
    "cubic-in-out": _cubic_in_out,
}


@dataclass(frozen=True)
class AnimationSettings:
    fps: int = FPS
    state_length: float = STATE_LENGTH
    transition_length: float = TRANSITION_LENGTH
    wrap: bool = True
    ease: str = "cubic-in-out"
    padding: float = VIEW_PADDING

    def __post_init__(self):
        if self.fps <= 0:
            raise ValidationError(f"fps must be positive, got {self.fps}")
        if self.state_length < 0 or self.transition_length < 0:
            raise ValidationError("state and transition lengths cannot be negative")
        if self.ease not in EASINGS:
            raise ValidationError(f"unknown easing {self.ease!r}; use one of {sorted(EASINGS)}")

    @property
    def hold_frames(self):
        return max(1, int(round(self.state_length * self.fps)))

    @property
    def transition_frames(self):
        return int(round(self.transition_length * self.fps))

    @property
    def frame_duration(self):
        """Milliseconds per frame."""
        return 1000.0 / self.fps


@dataclass
class Panel:
    layout: str
    nodes: pd.DataFrame
    edges: pd.DataFrame
    extent: tuple


@dataclass
class FrameSequence:
    frames: pd.DataFrame
    nodes: pd.DataFrame
    edges: pd.DataFrame
    order: list
    settings: AnimationSettings = field(default_factory=AnimationSettings)

    def __len__(self):
        return len(self.frames)

    def frame(self, number):
        """(info row, node rows, edge rows) of one frame."""
        info = self.frames.iloc[number]
        nodes = self.nodes[self.nodes["frame"] == number]
        edges = self.edges[self.edges["frame"] == number]
        return info, nodes, edges


# ---------- EXTENTS ----------

def data_extent(nodes, edges=None):
    """(xmin, xmax, ymin, ymax) over node positions and edge endpoints."""
    xs = [nodes["x"]]
    ys = [nodes["y"]]
    if edges is not None and len(edges):
        xs += [edges["x"], edges["xend"]]
        ys += [edges["y"], edges["yend"]]
    xs = pd.concat(xs)
    ys = pd.concat(ys)
    return float(xs.min()), float(xs.max()), float(ys.min()), float(ys.max())


def padded_extent(extent, padding=VIEW_PADDING):
    xmin, xmax, ymin, ymax = extent
    dx = (xmax - xmin) or 1.0
    dy = (ymax - ymin) or 1.0
    return xmin - dx * padding, xmax + dx * padding, ymin - dy * padding, ymax + dy * padding


# ---------- STATIC COMPARISON ----------

def comparison_panels(nodes, edges):
    """One panel per layout, each with its own extent. Nothing is shared."""
    panels = []
    for layout in observed_layouts(nodes):
        panel_nodes = nodes[nodes["layout"] == layout].reset_index(drop=True)
        panel_edges = edges[edges["layout"] == layout].reset_index(drop=True)
        panels.append(Panel(layout, panel_nodes, panel_edges,
                            data_extent(panel_nodes, panel_edges)))
    return panels


# ---------- ANIMATION ----------

def animation_order(layouts, order=ANIMATION_ORDER):
    """
    The curated sequence restricted to the layouts at hand. Layouts the
    curated list does not mention follow in display order.
    """
    present = list(dict.fromkeys(layouts))
    curated = [name for name in order if name in present]
    return curated + [name for name in layout_order(present) if name not in curated]


def _states(nodes, edges, order):
    """Per layout: node coordinates indexed by name, edge coordinates by edge_id."""
    states = {}
    for layout in order:
        state_nodes = nodes[nodes["layout"] == layout]
        if state_nodes.empty:
            raise ValidationError(f"layout {layout!r} has no rows in the node table")
        state_edges = edges[edges["layout"] == layout]
        states[layout] = (
            state_nodes.set_index("name")[["module", "x", "y"]],
            state_edges.set_index("edge_id")[["x", "y", "xend", "yend"]],
        )
    return states


def _match(source, target, source_layout, target_layout, kind):
    # both sides must describe the same nodes (or edges)
    for missing, layout in ((source.index.difference(target.index, sort=False), target_layout),
                            (target.index.difference(source.index, sort=False), source_layout)):
        if len(missing):
            if kind == "edge":
                raise MissingCoordinateError(layout, edge=missing[0])
            raise MissingCoordinateError(layout, node=missing[0])
    return target.reindex(source.index)


def _frame_rows(number, node_state, edge_state):
    node_rows = node_state.reset_index().assign(frame=number)
    edge_rows = edge_state.reset_index().assign(frame=number)
    return node_rows, edge_rows


def sequence_frames(nodes, edges, order=None, settings=None):
    """
    Builds the frame-by-frame animation across layouts.

    Each layout contributes `hold_frames` frames at its exact coordinates and,
    unless it is the last one (and wrap is off), `transition_frames` eased
    frames towards the next layout.
    """
    settings = settings or AnimationSettings()
    if order is None:
        order = animation_order(observed_layouts(nodes))
    order = list(dict.fromkeys(order))
    if not order:
        raise ValidationError("nothing to animate: no layouts given")

    states = _states(nodes, edges, order)
    ease = EASINGS[settings.ease]

    node_frames, edge_frames, info = [], [], []

    def emit(node_state, edge_state, state, next_state, phase, progress, title):
        number = len(info)
        node_rows, edge_rows = _frame_rows(number, node_state, edge_state)
        view = padded_extent(data_extent(node_rows, edge_rows), settings.padding)
        node_frames.append(node_rows)
        edge_frames.append(edge_rows)
        info.append((number, state, next_state, phase, progress, title) + view)

    for i, layout in enumerate(order):
        node_state, edge_state = states[layout]
        for _ in range(settings.hold_frames):
            emit(node_state, edge_state, layout, layout, "hold", 0.0, layout)

        if len(order) == 1 or (i == len(order) - 1 and not settings.wrap):
            continue
        target = order[(i + 1) % len(order)]
        target_nodes = _match(node_state, states[target][0], layout, target, "node")
        target_edges = _match(edge_state, states[target][1], layout, target, "edge")

        steps = settings.transition_frames
        for k in range(1, steps + 1):
            t = k / (steps + 1)
            w = ease(t)
            moved_nodes = node_state.copy()
            moved_nodes[["x", "y"]] = (node_state[["x", "y"]] * (1 - w) +
                                       target_nodes[["x", "y"]] * w)
            moved_edges = edge_state * (1 - w) + target_edges * w
            emit(moved_nodes, moved_edges, layout, target, "transition", t,
                 layout if t < 0.5 else target)

    frames = pd.DataFrame(info, columns=["frame", "state", "next_state", "phase", "progress",
                                         "title", "xmin", "xmax", "ymin", "ymax"])
    node_table = pd.concat(node_frames, ignore_index=True)[["frame", "name", "module", "x", "y"]]
    edge_table = pd.concat(edge_frames, ignore_index=True)[["frame", "edge_id", "x", "y", "xend", "yend"]]
    logger.info("Sequenced %d frames over %d layouts", len(frames), len(order))
    return FrameSequence(frames, node_table, edge_table, order, settings)
