import pytest

from layout_tour.frames import AnimationSettings
from layout_tour.graph_model import build_graph_model, example_edges
from layout_tour.layouts import run_layouts
from layout_tour.unify import unify_edges, unify_nodes


@pytest.fixture
def tiny_model():
    """Nodes 1, 2, 3 on a path."""
    return build_graph_model([(1, 2), (2, 3)])


@pytest.fixture
def tiny_tables(tiny_model):
    return run_layouts(tiny_model, ["circle", "star"])


@pytest.fixture
def tiny_nodes(tiny_model, tiny_tables):
    return unify_nodes(tiny_model, tiny_tables)


@pytest.fixture
def tiny_edges(tiny_model, tiny_nodes):
    return unify_edges(tiny_model, tiny_nodes)


@pytest.fixture(scope="session")
def example_model():
    return build_graph_model(example_edges())


@pytest.fixture
def quick_settings():
    # 2 hold frames, 3 transition frames
    return AnimationSettings(fps=2, state_length=1.0, transition_length=1.5)
