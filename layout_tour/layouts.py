"""
Named 2-D layouts of a GraphModel.

Every entry of LAYOUTS maps (model, seed) to {node: (x, y)}. Most are thin
calls into networkx. mds and sugiyama come from igraph, stress from
scikit-learn's SMACOF solver; star is a networkx shell layout around the hub.
"""

import logging

import igraph as ig
import networkx as nx
import numpy as np
import pandas as pd
from sklearn.manifold import smacof

from layout_tour.config import LAYOUT_ORDER, SEED
from layout_tour.errors import UnsupportedLayoutError

logger = logging.getLogger(__name__)


# ---------- HELPERS ----------

def _hub(G, nodes=None):
    """Highest-degree node; ties go to the node listed first."""
    nodes = list(G.nodes) if nodes is None else nodes
    return max(nodes, key=G.degree)


def _distance_matrix(G, nodes):
    """
    Shortest-path (hop) distances between all node pairs. Pairs in different
    components get the largest finite distance plus one.
    """
    index = {n: i for i, n in enumerate(nodes)}
    D = np.full((len(nodes), len(nodes)), np.inf)
    for source, lengths in nx.all_pairs_shortest_path_length(G):
        for target, d in lengths.items():
            D[index[source], index[target]] = d
    finite = D[np.isfinite(D)]
    cap = (finite.max() if finite.size else 0) + 1
    D[~np.isfinite(D)] = cap
    return D


def _to_igraph(model, directed=False):
    """igraph copy of the model; vertex i is model.node_names[i]."""
    nodes = model.node_names
    index = {n: i for i, n in enumerate(nodes)}
    pairs = zip(model.edges["From"].tolist(), model.edges["To"].tolist())
    g = ig.Graph(n=len(nodes), edges=[(index[u], index[v]) for u, v in pairs], directed=directed)
    return g, nodes


def _as_positions(nodes, coords):
    return {n: (float(x), float(y)) for n, (x, y) in zip(nodes, coords)}


# ---------- LAYOUT ALGORITHMS ----------

def circle_layout(model, seed):
    return nx.circular_layout(model.graph)


def star_layout(model, seed):
    G = model.graph
    if len(G) < 2:
        return {n: (0.0, 0.0) for n in G}
    center = _hub(G)
    return nx.shell_layout(G, nlist=[[center], [n for n in G if n != center]])


def kk_layout(model, seed):
    return nx.kamada_kawai_layout(model.graph)


def fr_layout(model, seed):
    # Fruchterman-Reingold; coordinates vary with the seed
    return nx.spring_layout(model.graph, seed=seed)


def spectral_layout(model, seed):
    return nx.spectral_layout(model.graph)


def spiral_layout(model, seed):
    return nx.spiral_layout(model.graph)


def mds_layout(model, seed):
    # classical MDS over shortest-path distances
    g, nodes = _to_igraph(model)
    if len(nodes) < 2:
        return {n: (0.0, 0.0) for n in nodes}
    D = _distance_matrix(model.graph, nodes)
    return _as_positions(nodes, g.layout_mds(dist=D.tolist(), dim=2).coords)


def stress_layout(model, seed):
    """Metric MDS (SMACOF stress majorization), started from the classical MDS."""
    nodes = model.node_names
    if len(nodes) < 3:
        return mds_layout(model, seed)
    D = _distance_matrix(model.graph, nodes)
    start = mds_layout(model, seed)
    init = np.array([start[n] for n in nodes])
    coords = smacof(D, n_components=2, init=init, n_init=1, random_state=seed)[0]
    return _as_positions(nodes, coords)


def tree_layout(model, seed):
    """
    Breadth-first tree rooted at the hub of each component, root on top.
    Components sit side by side.
    """
    G = model.graph
    pos = {}
    offset = 0.0
    for component in nx.connected_components(G):
        members = [n for n in G if n in component]
        sub = G.subgraph(members)
        part = nx.bfs_layout(sub, _hub(sub, members), align="horizontal")
        xs = [p[0] for p in part.values()]
        shift = offset - min(xs)
        for n, (x, y) in part.items():
            pos[n] = (x + shift, -y)
        offset += max(xs) - min(xs) + 1.0
    return pos


def sugiyama_layout(model, seed):
    """
    Layered drawing over the From -> To orientation; igraph breaks cycles and
    orders each layer. First layer on top.
    """
    g, nodes = _to_igraph(model, directed=True)
    coords = g.layout_sugiyama().coords[:len(nodes)]
    return {n: (float(x), -float(y)) for n, (x, y) in zip(nodes, coords)}


LAYOUTS = {
    "circle": circle_layout,
    "star": star_layout,
    "kk": kk_layout,
    "mds": mds_layout,
    "stress": stress_layout,
    "fr": fr_layout,
    "spectral": spectral_layout,
    "spiral": spiral_layout,
    "tree": tree_layout,
    "sugiyama": sugiyama_layout,
}

# layouts whose coordinates depend on the seed
STOCHASTIC_LAYOUTS = {"fr"}


def register_layout(name, func, stochastic=False):
    LAYOUTS[name] = func
    if stochastic:
        STOCHASTIC_LAYOUTS.add(name)


# ---------- RUNNER ----------

def compute_layout(model, name, seed=SEED):
    """
    Runs one named layout and returns its coordinate table [name, x, y, layout].
    Only nodes of the model are kept; gaps are left for the unifier to report.
    """
    if name not in LAYOUTS:
        raise UnsupportedLayoutError(name, LAYOUTS)
    pos = LAYOUTS[name](model, seed)

    rows = [(n, float(pos[n][0]), float(pos[n][1])) for n in model.node_names if n in pos]
    if len(rows) < len(model):
        logger.warning("Layout %s placed %d of %d nodes", name, len(rows), len(model))
    table = pd.DataFrame(rows, columns=["name", "x", "y"]).astype({"x": float, "y": float})
    table["layout"] = name
    table.attrs["layout"] = name
    return table


def run_layouts(model, names=LAYOUT_ORDER, seed=SEED):
    names = list(dict.fromkeys(names))
    for name in names:
        if name not in LAYOUTS:
            raise UnsupportedLayoutError(name, LAYOUTS)

    tables = {}
    for name in names:
        logger.info("Computing %s layout", name)
        tables[name] = compute_layout(model, name, seed)
    return tables
