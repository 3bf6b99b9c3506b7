"""
Plotly figures for the layout comparison and the layout animation, plus export.

Static images go through kaleido; the GIF is assembled from per-frame PNGs
with imageio.
"""

import logging
import math
import os

import imageio.v3 as iio
import plotly.graph_objs as go
from plotly.subplots import make_subplots

from layout_tour.config import (
    COMPARISON_HEIGHT,
    COMPARISON_WIDTH,
    EDGE_COLOR,
    EDGE_WIDTH,
    FACET_COLUMNS,
    FALLBACK_COLORS,
    FIGURE_HEIGHT,
    FIGURE_WIDTH,
    MODULE_COLORS,
    NODE_SIZE,
)
from layout_tour.frames import comparison_panels, padded_extent

logger = logging.getLogger(__name__)


# ----------- Colors -----------

def module_colors(modules):
    colors = {}
    spare = iter(FALLBACK_COLORS * (len(modules) // len(FALLBACK_COLORS) + 1))
    for module in modules:
        colors[module] = MODULE_COLORS.get(module) or next(spare)
    return colors


def module_order(nodes):
    # configured modules first, then the rest alphabetically
    return sorted(set(nodes["module"].astype(str)), key=lambda m: (m not in MODULE_COLORS, m))


# ----------- Traces -----------

def edge_trace(edges):
    """All edges of one panel or frame as a single line trace broken by None."""
    xs, ys = [], []
    for x0, y0, x1, y1 in zip(edges["x"], edges["y"], edges["xend"], edges["yend"]):
        xs += [x0, x1, None]
        ys += [y0, y1, None]
    return go.Scatter(
        x=xs, y=ys,
        mode="lines",
        line=dict(width=EDGE_WIDTH, color=EDGE_COLOR),
        hoverinfo="skip",
        showlegend=False,
    )


def node_traces(nodes, modules, colors):
    # one trace per module, always in the same order so frames line up
    traces = []
    for module in modules:
        part = nodes[nodes["module"].astype(str) == module]
        traces.append(go.Scatter(
            x=list(part["x"]), y=list(part["y"]),
            mode="markers",
            marker=dict(size=NODE_SIZE, color=colors[module], line=dict(width=0.8, color="white")),
            text=[f"{name} ({module})" for name in part["name"]],
            hoverinfo="text",
            name=module,
            showlegend=False,
        ))
    return traces


def _hidden_axis(bounds):
    return dict(range=list(bounds), visible=False, showgrid=False, zeroline=False)


# ----------- Static comparison -----------

def comparison_figure(nodes, edges, columns=FACET_COLUMNS, width=COMPARISON_WIDTH,
                      height=COMPARISON_HEIGHT):
    """
    One subplot per layout. Axis ranges are set per panel from its own extent,
    module is shown by fill colour and the legend is left out.
    """
    panels = comparison_panels(nodes, edges)
    modules = module_order(nodes)
    colors = module_colors(modules)
    columns = max(1, min(columns, len(panels)))
    rows = math.ceil(len(panels) / columns)

    fig = make_subplots(
        rows=rows, cols=columns,
        subplot_titles=[panel.layout for panel in panels],
        horizontal_spacing=0.03, vertical_spacing=0.08,
    )
    for i, panel in enumerate(panels):
        row, col = i // columns + 1, i % columns + 1
        fig.add_trace(edge_trace(panel.edges), row=row, col=col)
        for trace in node_traces(panel.nodes, modules, colors):
            fig.add_trace(trace, row=row, col=col)
        xmin, xmax, ymin, ymax = padded_extent(panel.extent)
        fig.update_xaxes(_hidden_axis((xmin, xmax)), row=row, col=col)
        fig.update_yaxes(_hidden_axis((ymin, ymax)), row=row, col=col)

    fig.update_layout(
        width=width, height=height,
        showlegend=False,
        plot_bgcolor="white", paper_bgcolor="white",
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig


# ----------- Animation -----------

def frame_traces(sequence, number, modules=None, colors=None):
    modules = modules or module_order(sequence.nodes)
    colors = colors or module_colors(modules)
    _, nodes, edges = sequence.frame(number)
    return [edge_trace(edges)] + node_traces(nodes, modules, colors)


def _frame_layout(info):
    return dict(
        title=dict(text=info["title"], x=0.5),
        xaxis=_hidden_axis((info["xmin"], info["xmax"])),
        yaxis=_hidden_axis((info["ymin"], info["ymax"])),
    )


def frame_figure(sequence, number, width=FIGURE_WIDTH, height=FIGURE_HEIGHT):
    """A single frame as a static figure, titled with the active layout."""
    info, _, _ = sequence.frame(number)
    fig = go.Figure(data=frame_traces(sequence, number))
    fig.update_layout(_frame_layout(info))
    fig.update_layout(width=width, height=height, showlegend=False,
                      plot_bgcolor="white", paper_bgcolor="white",
                      margin=dict(l=10, r=10, t=50, b=10))
    return fig


def animation_figure(sequence, width=FIGURE_WIDTH, height=FIGURE_HEIGHT):
    """
    Interactive animation: one plotly frame per sequenced frame, each carrying
    its own title and axis ranges, with play/pause buttons and a slider.
    """
    modules = module_order(sequence.nodes)
    colors = module_colors(modules)
    duration = sequence.settings.frame_duration

    frames = []
    steps = []
    for number in range(len(sequence)):
        info = sequence.frames.iloc[number]
        frames.append(go.Frame(
            name=str(number),
            data=frame_traces(sequence, number, modules, colors),
            layout=_frame_layout(info),
        ))
        steps.append(dict(
            method="animate",
            label=info["title"] if info["phase"] == "hold" else "",
            args=[[str(number)], dict(mode="immediate",
                                      frame=dict(duration=duration, redraw=True),
                                      transition=dict(duration=0))],
        ))

    fig = go.Figure(data=frames[0].data, frames=frames)
    fig.update_layout(_frame_layout(sequence.frames.iloc[0]))
    fig.update_layout(
        width=width, height=height,
        showlegend=False,
        plot_bgcolor="white", paper_bgcolor="white",
        margin=dict(l=10, r=10, t=50, b=10),
        updatemenus=[dict(
            type="buttons",
            direction="left",
            x=0.0, y=0.0, xanchor="left", yanchor="top",
            buttons=[
                dict(label="Play", method="animate",
                     args=[None, dict(frame=dict(duration=duration, redraw=True),
                                      transition=dict(duration=0),
                                      fromcurrent=True, mode="immediate")]),
                dict(label="Pause", method="animate",
                     args=[[None], dict(frame=dict(duration=0, redraw=False),
                                        transition=dict(duration=0), mode="immediate")]),
            ],
        )],
        sliders=[dict(active=0, x=0.15, len=0.85, y=0.0, yanchor="top",
                      currentvalue=dict(visible=False), steps=steps)],
    )
    return fig


# ----------- Export -----------

def frame_image(fig, width=FIGURE_WIDTH, height=FIGURE_HEIGHT):
    """Renders a figure to an RGB array through kaleido."""
    png = fig.to_image(format="png", width=width, height=height)
    return iio.imread(png, extension=".png")[..., :3]


def write_comparison(fig, out_dir, stem, width=COMPARISON_WIDTH, height=COMPARISON_HEIGHT):
    os.makedirs(out_dir, exist_ok=True)
    paths = []
    for suffix in ("svg", "png"):
        path = os.path.join(out_dir, f"{stem}.{suffix}")
        fig.write_image(path, width=width, height=height)
        paths.append(path)
    path = os.path.join(out_dir, f"{stem}.html")
    fig.write_html(path, include_plotlyjs="cdn")
    paths.append(path)
    logger.info("Comparison written to %s", ", ".join(paths))
    return paths


def write_animation_html(fig, path):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fig.write_html(path, include_plotlyjs="cdn", auto_play=False)
    return path


def write_animation(sequence, path, width=FIGURE_WIDTH, height=FIGURE_HEIGHT):
    """Looping GIF, one image per frame at a fixed pixel size."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    images = [frame_image(frame_figure(sequence, number, width, height), width, height)
              for number in range(len(sequence))]
    iio.imwrite(path, images, extension=".gif",
                duration=int(round(sequence.settings.frame_duration)), loop=0)
    logger.info("Animation written to %s (%d frames)", path, len(images))
    return path
