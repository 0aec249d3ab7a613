import math

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
from matplotlib.colors import to_hex


class NetworkVisualizer:
    """Topology and convergence plots for an ant colony."""

    def __init__(self, colony, seed=42):
        self.colony = colony
        self.topology = colony.topology
        self.graph = colony.topology.graph
        self.pos = nx.spring_layout(self.graph, seed=seed) if len(self.graph) else {}

    def edge_values(self, edge_attribute='pheromone'):
        """Value of ``edge_attribute`` for every edge, in graph order."""
        values = []
        for u, v in self.graph.edges():
            if edge_attribute == 'pheromone':
                values.append(self.colony.pheromones.level(u, v))
            elif edge_attribute == 'weight':
                values.append(self.topology.weight(u, v))
            else:
                raise ValueError(f"Unknown edge attribute: {edge_attribute}")
        return values

    def visualize_network(self, source=None, destination=None, paths=None,
                          edge_attribute='pheromone', title=None):
        """Visualize the topology with configurable edge coloring.

        Args:
            source: Source node (colored green)
            destination: Destination node (colored red)
            paths: List of paths to highlight
            edge_attribute: 'pheromone' or 'weight'
            title: Custom title for the plot
        """
        fig, ax = plt.subplots(figsize=(12, 10))

        nodes = list(self.graph.nodes())
        colors = {n: 'lightblue' for n in nodes}
        # Highlight intermediate nodes on paths
        for path in paths or []:
            for node in path[1:-1]:
                colors[node] = 'orange'
        if source in colors:
            colors[source] = 'green'
        if destination in colors:
            colors[destination] = 'red'

        nx.draw_networkx_nodes(self.graph, self.pos, nodelist=nodes,
                               node_color=[colors[n] for n in nodes], node_size=500, ax=ax)
        nx.draw_networkx_labels(self.graph, self.pos, font_size=10, font_weight='bold', ax=ax)

        edge_cmap = plt.cm.YlOrRd if edge_attribute == 'weight' else plt.cm.Blues
        edges = list(self.graph.edges())
        edge_colors = self.edge_values(edge_attribute)

        nx.draw_networkx_edges(
            self.graph, self.pos,
            edgelist=edges,
            edge_color=edge_colors,
            edge_cmap=edge_cmap,
            width=2,
            arrows=True,
            arrowstyle='-|>',
            arrowsize=15,
            ax=ax
        )

        for i, path in enumerate(paths or []):
            path_edges = list(zip(path, path[1:]))
            if not path_edges:
                continue
            nx.draw_networkx_edges(
                self.graph, self.pos,
                edgelist=path_edges,
                edge_color=to_hex(plt.cm.Set1(i % 9)),
                width=3,
                arrows=True,
                arrowstyle='-|>',
                arrowsize=20,
                ax=ax
            )

        sm = plt.cm.ScalarMappable(
            cmap=edge_cmap,
            norm=plt.Normalize(
                vmin=min(edge_colors) if edge_colors else 0,
                vmax=max(edge_colors) if edge_colors else 1
            )
        )
        sm.set_array([])
        cbar = fig.colorbar(sm, ax=ax, shrink=0.8)

        attribute_labels = {
            'pheromone': 'Pheromone Level',
            'weight': 'Edge Weight'
        }
        cbar.set_label(attribute_labels[edge_attribute])
        ax.set_title(title or f'Ant Colony Topology - {attribute_labels[edge_attribute]}')
        ax.axis('off')
        fig.tight_layout()

        return fig

    def visualize_convergence(self, history=None, title=None):
        """Plot the best-so-far path length per iteration."""
        history = self.colony.history_best_lengths if history is None else history
        lengths = np.array([np.nan if math.isinf(h) else h for h in history], dtype=float)

        fig, ax = plt.subplots(figsize=(8, 5))
        ax.plot(np.arange(1, len(lengths) + 1), lengths, '-o', markersize=3)
        ax.set_xlabel('Iteration')
        ax.set_ylabel('Best-so-far path length')
        ax.set_title(title or 'Ant colony convergence')
        fig.tight_layout()
        return fig

    def display_network_stats(self):
        """Key statistics about the topology and its pheromone state."""
        G = self.graph
        n = G.number_of_nodes()
        weights = self.edge_values('weight')
        pheromones = self.edge_values('pheromone')
        return {
            "Nodes": n,
            "Edges": G.number_of_edges(),
            "Average out-degree": float(sum(dict(G.out_degree()).values())) / n if n else 0.0,
            "Average weight": float(np.mean(weights)) if weights else 0.0,
            "Average pheromone": float(np.mean(pheromones)) if pheromones else 0.0,
            "Max pheromone": float(np.max(pheromones)) if pheromones else 0.0
        }
