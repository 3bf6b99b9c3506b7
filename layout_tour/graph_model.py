import logging
import numbers
import os
from dataclasses import dataclass

import networkx as nx
import pandas as pd

from layout_tour.config import MODULE_PARTITION, UNASSIGNED
from layout_tour.errors import ValidationError

logger = logging.getLogger(__name__)

# ---------- EXAMPLE NETWORK ----------

# core 1-8, signalling 9-18, periphery 19-30; 31 and 32 sit outside every module
EXAMPLE_EDGES = [
    (1, 2), (1, 3), (1, 4), (2, 3), (2, 5), (3, 6), (4, 7), (5, 8), (6, 8), (7, 8),
    (1, 9), (2, 10), (3, 11), (4, 12), (9, 13), (10, 13), (11, 14), (12, 15),
    (13, 16), (14, 16), (15, 17), (16, 18), (17, 18),
    (9, 19), (9, 20), (10, 21), (11, 22), (12, 23), (12, 24), (14, 25), (15, 26),
    (16, 27), (17, 28), (18, 29), (18, 30), (19, 20), (27, 28),
    (30, 31), (31, 32), (29, 32),
]

SPREADSHEET_SUFFIXES = (".xlsx", ".xls")


@dataclass(frozen=True)
class GraphModel:
    """
    The fixed network every layout runs against.

    graph: undirected networkx graph
    nodes: DataFrame [name, module], one row per node
    edges: DataFrame [From, To, edge_id], one row per undirected edge
    """
    graph: nx.Graph
    nodes: pd.DataFrame
    edges: pd.DataFrame
    directed: bool = False

    @property
    def node_names(self):
        return self.nodes["name"].tolist()

    def __len__(self):
        return len(self.nodes)


def example_edges():
    return pd.DataFrame(EXAMPLE_EDGES, columns=["From", "To"])


def load_edge_table(path):
    """
    Reads an edge list with From/To columns from a CSV file or a spreadsheet.
    """
    suffix = os.path.splitext(path)[1].lower()
    if suffix == ".csv":
        table = pd.read_csv(path)
    elif suffix in SPREADSHEET_SUFFIXES:
        table = pd.read_excel(path)
    else:
        raise ValidationError(f"cannot read edge table from {path!r}: expected .csv, .xlsx or .xls")
    logger.info("Loaded %d edge rows from %s", len(table), path)
    return _check_edge_table(table)


def _check_edge_table(edges):
    missing = [col for col in ("From", "To") if col not in edges.columns]
    if missing:
        raise ValidationError(f"edge table is missing column(s): {', '.join(missing)}")
    edges = edges[["From", "To"]]
    null_rows = edges[edges.isna().any(axis=1)]
    if not null_rows.empty:
        raise ValidationError(f"edge table has empty endpoints in row(s) {list(null_rows.index)}")
    return edges.reset_index(drop=True)


def _as_int(node):
    if isinstance(node, bool):
        return None
    if isinstance(node, numbers.Integral):
        return int(node)
    if isinstance(node, numbers.Real) and float(node).is_integer():
        return int(node)
    if isinstance(node, str) and node.strip().lstrip("-").isdigit():
        return int(node.strip())
    return None


def assign_module(node, partition=MODULE_PARTITION):
    """
    Maps a node identifier to its module through the static range partition.
    Identifiers that are not integers or fall outside every range are UNASSIGNED.
    """
    value = _as_int(node)
    if value is None:
        return UNASSIGNED
    for start, stop, label in partition:
        if start <= value <= stop:
            return label
    return UNASSIGNED


def edge_id(u, v):
    return f"{u}-{v}"


def _dedupe_edges(edges):
    # undirected: (u, v) and (v, u) are the same edge, first orientation wins
    seen = set()
    keep = []
    for u, v in zip(edges["From"].tolist(), edges["To"].tolist()):
        key = frozenset((u, v))
        if key in seen:
            logger.warning("Dropping duplicate undirected edge %s", edge_id(u, v))
            continue
        seen.add(key)
        keep.append((u, v, edge_id(u, v)))
    return pd.DataFrame(keep, columns=["From", "To", "edge_id"])


def build_graph_model(edges, nodes=None, partition=MODULE_PARTITION, strict=False):
    """
    Builds the immutable graph model from an edge table and an optional node table.

    Without a node table the node universe is the union of From and To.
    With one, every edge endpoint must be listed in its `name` column; a `module`
    column, where set, takes precedence over the partition.
    """
    if not isinstance(edges, pd.DataFrame):
        edges = pd.DataFrame(list(edges), columns=["From", "To"])
    edges = _dedupe_edges(_check_edge_table(edges))

    # first-seen order, row by row
    endpoints = list(dict.fromkeys(n for pair in zip(edges["From"].tolist(), edges["To"].tolist()) for n in pair))

    if nodes is None:
        node_table = pd.DataFrame({"name": endpoints})
        node_table["module"] = [assign_module(n, partition) for n in endpoints]
    else:
        node_table = _check_node_table(nodes, endpoints, partition)

    if strict:
        unassigned = list(node_table.loc[node_table["module"] == UNASSIGNED, "name"])
        if unassigned:
            raise ValidationError(f"node(s) outside every module: {unassigned}")

    G = nx.Graph()
    for name, module in zip(node_table["name"].tolist(), node_table["module"].tolist()):
        G.add_node(name, module=module)
    for u, v, eid in zip(edges["From"].tolist(), edges["To"].tolist(), edges["edge_id"].tolist()):
        G.add_edge(u, v, edge_id=eid)

    logger.info("Graph model: %d nodes, %d edges", G.number_of_nodes(), G.number_of_edges())
    return GraphModel(graph=G, nodes=node_table, edges=edges)


def _check_node_table(nodes, endpoints, partition):
    nodes = pd.DataFrame(nodes)
    if "name" not in nodes.columns:
        raise ValidationError("node table needs a 'name' column")
    dupes = nodes.loc[nodes["name"].duplicated(), "name"].tolist()
    if dupes:
        raise ValidationError(f"node table lists node(s) more than once: {dupes}")

    names = nodes["name"].tolist()
    known = set(names)
    unknown = [n for n in endpoints if n not in known]
    if unknown:
        raise ValidationError(f"edge(s) reference node(s) missing from the node table: {unknown}")

    labels = [assign_module(n, partition) for n in names]
    if "module" in nodes.columns:
        labels = [given if isinstance(given, str) and given else derived
                  for given, derived in zip(nodes["module"], labels)]
    return pd.DataFrame({"name": names, "module": labels})
