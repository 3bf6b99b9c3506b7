"""
Builds the example network, lays it out ten different ways and writes

  output/layout_nodes.csv, output/layout_edges.csv   unified coordinate tables
  output/layouts_comparison.{svg,png,html}           one panel per layout
  output/layouts_animation.{gif,html}                transitions between layouts

No flags and no environment variables; edit layout_tour/config.py instead.
"""

import logging

from layout_tour.config import EDGES_FILE, LAYOUT_ORDER, OUTPUT_DIR
from layout_tour.graph_model import load_edge_table
from layout_tour.pipeline import run_pipeline, write_artifacts

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ----------- Load Edges -----------
edges = load_edge_table(EDGES_FILE)

# ----------- Layouts, Tables, Frames -----------
result = run_pipeline(edges, layouts=LAYOUT_ORDER)

print("=== Summary ===")
print(f"Nodes:  {len(result.model)}")
print(f"Edges:  {len(result.model.edges)}")
print(f"Layouts: {', '.join(result.sequence.order)}")
print(f"Node table rows: {len(result.nodes)}")
print(f"Edge table rows: {len(result.edges)}")
print(f"Animation frames: {len(result.sequence)}")

# ----------- Write Artifacts -----------
paths = write_artifacts(result, OUTPUT_DIR)
print("\nFiles written:")
for path in paths:
    print(f"  {path}")
