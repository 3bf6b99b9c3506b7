"""
Dash viewer: step through the computed layouts of the example network.

Switching layout moves every node to its preset position in the new layout
with an animated cytoscape transition. Clicking a node lists its module and
its coordinates in every layout.

    python -m layout_tour.viewer
"""

import logging

import dash_cytoscape as cyto
from dash import dcc, html
from dash.dependencies import Input, Output, State
from dash_extensions.enrich import DashProxy, Trigger, TriggerTransform

from layout_tour.config import EDGES_FILE, VIEWER_ANIMATION_MS, VIEWER_SIZE
from layout_tour.frames import data_extent
from layout_tour.render import module_colors, module_order

logger = logging.getLogger(__name__)

MARGIN = 30


# ----------- Elements -----------

def layout_elements(model, nodes, layout, size=VIEWER_SIZE):
    """
    Cytoscape elements for one layout. Coordinates are scaled into a
    size x size canvas and y is flipped (screen y grows downwards).
    """
    part = nodes[nodes["layout"] == layout]
    xmin, xmax, ymin, ymax = data_extent(part)
    span = max(xmax - xmin, ymax - ymin) or 1.0
    scale = (size - 2 * MARGIN) / span

    elements = [{
        "data": {"id": str(name), "label": str(name), "module": str(module)},
        "position": {"x": float(MARGIN + (x - xmin) * scale), "y": float(MARGIN + (ymax - y) * scale)},
        "grabbable": True,
        "selectable": True,
    } for name, module, x, y in zip(part["name"], part["module"], part["x"], part["y"])]

    elements += [{
        "data": {"id": eid, "source": str(u), "target": str(v)}
    } for u, v, eid in zip(model.edges["From"], model.edges["To"], model.edges["edge_id"])]
    return elements


def next_layout(current, order):
    if current not in order:
        return order[0]
    return order[(order.index(current) + 1) % len(order)]


def node_details(nodes, name):
    """Module and per-layout (x, y) of one node; None if the node is unknown."""
    rows = nodes[nodes["name"].astype(str) == str(name)]
    if rows.empty:
        return None
    return {
        "name": str(name),
        "module": rows["module"].iloc[0],
        "positions": {str(layout): (round(float(x), 3), round(float(y), 3))
                      for layout, x, y in zip(rows["layout"], rows["x"], rows["y"])},
    }


def stylesheet(modules):
    colors = module_colors(modules)
    styles = [
        {'selector': 'node', 'style': {'label': 'data(label)', 'width': 22, 'height': 22, 'font-size': 9}},
        {'selector': 'edge', 'style': {'curve-style': 'straight', 'line-color': '#9a9a9a', 'width': 1.5}},
        {'selector': ':selected', 'style': {'background-color': '#FF1493', 'line-color': '#FF1493'}},
    ]
    for module, color in colors.items():
        styles.append({'selector': f'node[module = "{module}"]', 'style': {'background-color': color}})
    return styles


# ----------- Dash App -----------

def create_app(result, order=None):
    order = list(order or result.sequence.order)
    nodes = result.nodes
    preset = {'name': 'preset', 'animate': True, 'animationDuration': VIEWER_ANIMATION_MS}

    app = DashProxy(__name__, transforms=[TriggerTransform()])

    app.layout = html.Div([
        html.H3("Layout tour"),
        html.Div([
            dcc.Dropdown(id='layout-picker', options=[{'label': name, 'value': name} for name in order],
                         value=order[0], clearable=False, style={'width': '220px'}),
            html.Button("Next layout", id='next-btn', n_clicks=0, style={'marginLeft': '10px'}),
        ], style={'display': 'flex', 'alignItems': 'center'}),
        html.Div([
            cyto.Cytoscape(
                id='cytoscape-network',
                elements=layout_elements(result.model, nodes, order[0]),
                layout={'name': 'preset'},
                style={'width': f'{VIEWER_SIZE}px', 'height': f'{VIEWER_SIZE}px'},
                stylesheet=stylesheet(module_order(nodes)),
                userZoomingEnabled=True,
                userPanningEnabled=True,
                minZoom=0.2,
                maxZoom=3,
            ),
            html.Div(id='info-box', style={
                'marginLeft': '20px',
                'padding': '10px',
                'border': '1px solid #999',
                'borderRadius': '5px',
                'width': '280px',
                'backgroundColor': '#f9f9f9',
                'boxShadow': '2px 2px 6px rgba(0,0,0,0.1)'
            }),
        ], style={'display': 'flex', 'marginTop': '10px'}),
    ])

    @app.callback(
        Output('layout-picker', 'value'),
        Trigger('next-btn', 'n_clicks'),
        State('layout-picker', 'value'),
        prevent_initial_call=True
    )
    def advance(current):
        return next_layout(current, order)

    @app.callback(
        Output('cytoscape-network', 'elements'),
        Output('cytoscape-network', 'layout'),
        Input('layout-picker', 'value')
    )
    def show_layout(layout):
        logger.debug("Showing layout %s", layout)
        return layout_elements(result.model, nodes, layout), preset

    @app.callback(
        Output('info-box', 'children'),
        Input('cytoscape-network', 'tapNodeData')
    )
    def show_info(node_data):
        if not node_data:
            return "Click on a node to see its positions."
        details = node_details(nodes, node_data['id'])
        if details is None:
            return "Unknown node."
        return html.Div([
            html.H4(f"Node: {details['name']}"),
            html.P(f"Module: {details['module']}"),
            html.Strong("Positions:"),
            html.Ul([html.Li(f"{layout}: ({x}, {y})") for layout, (x, y) in details['positions'].items()]),
        ])

    return app


# ----------- Run Server -----------
if __name__ == '__main__':
    from layout_tour.graph_model import load_edge_table
    from layout_tour.pipeline import run_pipeline

    logging.basicConfig(level=logging.INFO)
    app = create_app(run_pipeline(load_edge_table(EDGES_FILE)))
    app.run(debug=True)
