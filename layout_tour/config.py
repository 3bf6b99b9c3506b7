import os

# ------------------------------
# Config (defaults; no flags)
# ------------------------------
PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.dirname(PACKAGE_DIR)
DATA_DIR = os.path.join(ROOT_DIR, "data")
EDGES_FILE = os.path.join(DATA_DIR, "example_edges.csv")
OUTPUT_DIR = os.path.join(ROOT_DIR, "output")

# Fixed seed for the stochastic layouts (force-directed)
SEED = 42

# Module partition over node identifiers: inclusive (start, stop, label)
MODULE_PARTITION = [
    (1, 8, "core"),
    (9, 18, "signalling"),
    (19, 30, "periphery"),
]
UNASSIGNED = "unassigned"

# Display order of the comparison panels (and of the categorical layout column)
LAYOUT_ORDER = [
    "circle", "star", "kk", "mds", "stress",
    "fr", "spectral", "spiral", "tree", "sugiyama",
]

# Curated animation sequence: alternate round, layered and organic layouts
ANIMATION_ORDER = [
    "circle", "kk", "tree", "fr", "star",
    "stress", "sugiyama", "spiral", "mds", "spectral",
]

# ----------- Figures -----------
FIGURE_WIDTH = 800     # animation frames, 4:3
FIGURE_HEIGHT = 600
COMPARISON_WIDTH = 1400
COMPARISON_HEIGHT = 1000
FACET_COLUMNS = 4

NODE_SIZE = 11
EDGE_COLOR = "#9a9a9a"
EDGE_WIDTH = 1.2
MODULE_COLORS = {
    "core": "#6a3d9a",
    "signalling": "#1f78b4",
    "periphery": "#33a02c",
    UNASSIGNED: "#bdbdbd",
}
FALLBACK_COLORS = ["#e31a1c", "#ff7f00", "#b15928", "#fb9a99", "#cab2d6"]

# ----------- Animation -----------
FPS = 10
STATE_LENGTH = 1.0          # seconds held on each layout
TRANSITION_LENGTH = 1.5     # seconds per transition
VIEW_PADDING = 0.08         # fraction of the extent added around the data

# ----------- Output files -----------
COMPARISON_STEM = "layouts_comparison"
ANIMATION_STEM = "layouts_animation"

# ----------- Viewer -----------
VIEWER_SIZE = 600           # px, square canvas
VIEWER_ANIMATION_MS = 1000
