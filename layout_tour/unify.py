"""
Stitches per-layout coordinate tables into long-form node and edge tables.

Edge endpoints are always looked up on the composite key (name, layout):
joining on the node name alone would pair an edge's start in one layout with
its end in another.
"""

import logging

import numpy as np
import pandas as pd

from layout_tour.config import LAYOUT_ORDER
from layout_tour.errors import MissingCoordinateError, ValidationError

logger = logging.getLogger(__name__)

NODE_COLUMNS = ["x", "y", "name", "layout", "module"]
EDGE_COLUMNS = ["edge_id", "x", "y", "xend", "yend", "layout"]


def layout_order(names, order=LAYOUT_ORDER):
    """Fixed display order first, anything else after it in the order given."""
    names = list(dict.fromkeys(names))
    ranked = [name for name in order if name in names]
    return ranked + [name for name in names if name not in ranked]


def observed_layouts(table):
    """Layouts present in a unified table, in its categorical order."""
    present = set(table["layout"].astype(str))
    if isinstance(table["layout"].dtype, pd.CategoricalDtype):
        return [name for name in table["layout"].cat.categories if name in present]
    return layout_order(table["layout"].astype(str).tolist())


def _declared_layout(table):
    if len(table):
        return str(table["layout"].iloc[0])
    if "layout" in table.attrs:
        return str(table.attrs["layout"])
    raise ValidationError("empty layout table without a layout name; pass the tables as a dict")


def _check_unique(coords):
    dupes = coords[coords.duplicated(["name", "layout"], keep=False)]
    if not dupes.empty:
        name, layout = dupes.iloc[0][["name", "layout"]]
        raise ValidationError(f"node {name!r} has more than one position in layout {layout!r}")


def unify_nodes(model, tables):
    """
    Concatenates the per-layout tables and joins each node's module label.

    Every node of the model must appear exactly once per layout with finite
    coordinates; the result has columns x, y, name, layout, module.
    """
    if isinstance(tables, dict):
        # the key names the layout, even for a table without rows
        frames = [f.assign(layout=name) for name, f in tables.items()]
        declared = list(tables)
    else:
        frames = list(tables)
        declared = [_declared_layout(f) for f in frames]
    if not frames:
        raise ValidationError("no layout tables to unify")
    coords = pd.concat([f[["name", "x", "y", "layout"]] for f in frames], ignore_index=True)
    coords["layout"] = coords["layout"].astype(str)
    coords[["x", "y"]] = coords[["x", "y"]].astype(float)
    layouts = layout_order(declared + coords["layout"].tolist())

    _check_unique(coords)
    known = set(model.node_names)
    strays = coords.loc[~coords["name"].isin(known), ["name", "layout"]]
    if not strays.empty:
        name, layout = strays.iloc[0]
        raise ValidationError(f"layout {layout!r} placed node {name!r}, which is not in the graph")

    present = set(zip(coords["name"].tolist(), coords["layout"].tolist()))
    for layout in layouts:
        for node in model.node_names:
            if (node, layout) not in present:
                raise MissingCoordinateError(layout, node=node)

    bad = coords[~(np.isfinite(coords["x"]) & np.isfinite(coords["y"]))]
    if not bad.empty:
        raise MissingCoordinateError(bad.iloc[0]["layout"], node=bad.iloc[0]["name"])

    unified = coords.merge(model.nodes[["name", "module"]], on="name", how="left",
                           validate="many_to_one")
    unified["layout"] = pd.Categorical(unified["layout"], categories=layouts, ordered=True)
    unified = unified.sort_values("layout", kind="stable").reset_index(drop=True)
    logger.info("Unified node table: %d rows over %d layouts", len(unified), len(layouts))
    return unified[NODE_COLUMNS]


def unify_edges(model, nodes):
    """
    Resolves every (edge, layout) pair to (x, y, xend, yend) from that layout's
    node positions only. Yields exactly |edges| x |layouts| rows.
    """
    layouts = observed_layouts(nodes)
    if not layouts:
        raise ValidationError("node table has no layouts")
    coords = nodes[["name", "layout", "x", "y"]].copy()
    coords["layout"] = coords["layout"].astype(str)
    _check_unique(coords)

    raw = model.edges[["From", "To", "edge_id"]]
    pairs = pd.concat([raw.assign(layout=layout) for layout in layouts], ignore_index=True)

    start = coords.rename(columns={"name": "From"})
    end = coords.rename(columns={"name": "To", "x": "xend", "y": "yend"})
    resolved = (
        pairs.merge(start, on=["From", "layout"], how="left", validate="many_to_one")
             .merge(end, on=["To", "layout"], how="left", validate="many_to_one")
    )

    for endpoint, column in (("From", "x"), ("To", "xend")):
        unresolved = resolved[resolved[column].isna()]
        if not unresolved.empty:
            row = unresolved.iloc[0]
            raise MissingCoordinateError(row["layout"], node=row[endpoint],
                                         edge=row["edge_id"], endpoint=endpoint)

    resolved["layout"] = pd.Categorical(resolved["layout"], categories=layouts, ordered=True)
    logger.info("Unified edge table: %d rows (%d edges x %d layouts)",
                len(resolved), len(raw), len(layouts))
    return resolved[EDGE_COLUMNS]
