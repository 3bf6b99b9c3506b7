import logging
import os
from dataclasses import dataclass

import pandas as pd

from layout_tour.config import (
    ANIMATION_STEM,
    COMPARISON_STEM,
    LAYOUT_ORDER,
    MODULE_PARTITION,
    OUTPUT_DIR,
    SEED,
)
from layout_tour.frames import FrameSequence, comparison_panels, sequence_frames
from layout_tour.graph_model import GraphModel, build_graph_model
from layout_tour.layouts import run_layouts
from layout_tour.render import (
    animation_figure,
    comparison_figure,
    write_animation,
    write_animation_html,
    write_comparison,
)
from layout_tour.unify import unify_edges, unify_nodes

logger = logging.getLogger(__name__)


@dataclass
class TourResult:
    model: GraphModel
    tables: dict
    nodes: pd.DataFrame
    edges: pd.DataFrame
    panels: list
    sequence: FrameSequence


def run_pipeline(edges, nodes=None, layouts=LAYOUT_ORDER, seed=SEED, settings=None,
                 partition=MODULE_PARTITION, strict=False):
    """
    Edge table in, unified tables, comparison panels and animation frames out.
    Any error aborts the whole run.
    """
    model = build_graph_model(edges, nodes, partition=partition, strict=strict)
    tables = run_layouts(model, layouts, seed)
    node_table = unify_nodes(model, tables)
    edge_table = unify_edges(model, node_table)
    panels = comparison_panels(node_table, edge_table)
    sequence = sequence_frames(node_table, edge_table, settings=settings)
    return TourResult(model, tables, node_table, edge_table, panels, sequence)


def write_artifacts(result, out_dir=OUTPUT_DIR, gif=True):
    os.makedirs(out_dir, exist_ok=True)
    written = []

    for name, table in (("layout_nodes", result.nodes), ("layout_edges", result.edges)):
        path = os.path.join(out_dir, f"{name}.csv")
        table.to_csv(path, index=False)
        written.append(path)

    written += write_comparison(comparison_figure(result.nodes, result.edges), out_dir, COMPARISON_STEM)
    written.append(write_animation_html(animation_figure(result.sequence),
                                        os.path.join(out_dir, f"{ANIMATION_STEM}.html")))
    if gif:
        written.append(write_animation(result.sequence, os.path.join(out_dir, f"{ANIMATION_STEM}.gif")))
    return written
