import math

import matplotlib.pyplot as plt
import pytest

from acopath.core.colony import AntColony
from acopath.visualization.network_viz import NetworkVisualizer


@pytest.fixture
def colony(shortcut_edges):
    colony = AntColony(shortcut_edges, ants=5, iterations=4, seed=0)
    colony.path(0, 3)
    return colony


def test_visualize_network(colony):
    """Both edge colorings produce a figure."""
    visualizer = NetworkVisualizer(colony)
    for attribute in ('pheromone', 'weight'):
        fig = visualizer.visualize_network(0, 3, [colony.best_path], edge_attribute=attribute)
        assert fig.axes
        plt.close(fig)


def test_unknown_attribute(colony):
    """Only pheromone and weight can color edges."""
    with pytest.raises(ValueError):
        NetworkVisualizer(colony).edge_values('congestion')


def test_visualize_convergence():
    """Iterations without a path are plotted as gaps."""
    colony = AntColony([(0, 1, 1)], ants=1, iterations=3, seed=0)
    colony.path(1, 0)
    fig = NetworkVisualizer(colony).visualize_convergence()
    line = fig.axes[0].lines[0]
    assert all(math.isnan(y) for y in line.get_ydata())
    plt.close(fig)


def test_network_stats(colony):
    """Statistics reflect the topology and its pheromone."""
    stats = NetworkVisualizer(colony).display_network_stats()
    assert stats['Nodes'] == 4
    assert stats['Edges'] == 4
    assert stats['Average weight'] == 3.0
    assert stats['Max pheromone'] >= stats['Average pheromone'] > 0
