"""
Compare and animate networkx layouts of one small network.

The pipeline goes edges -> graph model -> per-layout coordinates ->
unified node/edge tables -> comparison panels or an interpolated frame
sequence -> plotly figures, GIF and HTML.
"""

from layout_tour.errors import (
    LayoutTourError,
    MissingCoordinateError,
    UnsupportedLayoutError,
    ValidationError,
)
from layout_tour.graph_model import GraphModel, build_graph_model, example_edges, load_edge_table
from layout_tour.layouts import LAYOUTS, compute_layout, run_layouts
from layout_tour.unify import unify_edges, unify_nodes
from layout_tour.frames import AnimationSettings, comparison_panels, sequence_frames
from layout_tour.pipeline import run_pipeline, write_artifacts

__version__ = "0.1.0"
