"""Errors raised by the layout pipeline. All of them abort the run."""


class LayoutTourError(Exception):
    """Base class for every pipeline error."""


class ValidationError(LayoutTourError):
    """The input node/edge tables are inconsistent or malformed."""


class MissingCoordinateError(LayoutTourError):
    """
    A layout did not produce a position that a node or an edge endpoint needs.

    ``endpoint`` is "From" or "To" when an edge could not be resolved.
    """

    def __init__(self, layout, node=None, edge=None, endpoint=None):
        self.layout = layout
        self.node = node
        self.edge = edge
        self.endpoint = endpoint
        if edge is not None and endpoint is not None:
            msg = f"edge {edge!r}: no coordinates for {endpoint} node {node!r} in layout {layout!r}"
        elif edge is not None:
            msg = f"edge {edge!r} has no coordinates in layout {layout!r}"
        else:
            msg = f"node {node!r} has no coordinates in layout {layout!r}"
        super().__init__(msg)


class UnsupportedLayoutError(LayoutTourError):
    def __init__(self, name, available=()):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"unsupported layout {name!r}; available: {', '.join(self.available)}"
        )
