import logging
import math
import os

import matplotlib.pyplot as plt
import networkx as nx
import pandas as pd
from matplotlib.lines import Line2D
from tabulate import tabulate

logger = logging.getLogger(__name__)


class PathAnalyzer:
    """Analyze path selection decisions of an ant colony."""

    def __init__(self, colony):
        """Initialize with the colony whose decisions are analyzed."""
        self.colony = colony
        self.topology = colony.topology
        self.graph = colony.topology.graph
        self.pheromones = colony.pheromones
        self.policy = colony.policy

    def analyze_path(self, source, destination, output_dir=None):
        """Compare the colony's path with the exact shortest path.

        Runs the colony, computes the Dijkstra shortest path on the edge
        weights, and breaks the colony's path down step by step. When
        ``output_dir`` is given, a CSV of the steps, a text report and a
        comparison figure are written there.

        Returns:
            Dictionary with both paths, their lengths, the optimality gap,
            the per-step DataFrame and the paths of any written files
        """
        aco_path = self.colony.path(source, destination)
        aco_length = self.colony.best_length if aco_path else math.inf
        dijkstra_path, dijkstra_length = self.shortest_path(source, destination)

        steps = self.step_table(aco_path)
        analysis = {
            'aco_path': aco_path,
            'aco_length': aco_length,
            'dijkstra_path': dijkstra_path,
            'dijkstra_length': dijkstra_length,
            'gap': self.optimality_gap(aco_length, dijkstra_length),
            'steps': steps
        }

        if output_dir is not None:
            os.makedirs(output_dir, exist_ok=True)
            csv_path = os.path.join(output_dir, f'path_steps_{source}_to_{destination}.csv')
            steps.to_csv(csv_path, index=False)

            report_path = os.path.join(output_dir, f'path_analysis_{source}_to_{destination}.txt')
            with open(report_path, 'w') as f:
                f.write(self.format_report(analysis, source, destination))

            comparison_path = os.path.join(output_dir, f'path_comparison_{source}_to_{destination}.png')
            self._visualize_path_comparison(source, destination, aco_path, dijkstra_path, comparison_path)

            analysis['files'] = {
                'csv_data': csv_path,
                'report': report_path,
                'path_comparison': comparison_path
            }
            logger.info("Wrote path analysis for %s -> %s to %s", source, destination, output_dir)

        return analysis

    def shortest_path(self, source, destination):
        """Exact shortest path on edge weights, ``([], inf)`` if unreachable."""
        def edge_weight(u, v, edge_data):
            return edge_data['edge'].weight

        try:
            length, path = nx.single_source_dijkstra(self.graph, source, destination, weight=edge_weight)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return [], math.inf
        return path, length

    @staticmethod
    def optimality_gap(aco_length, optimal_length):
        """Relative excess of the colony's length over the optimum."""
        if math.isinf(aco_length) or math.isinf(optimal_length) or optimal_length <= 0:
            return math.nan
        return (aco_length - optimal_length) / optimal_length

    def step_table(self, path):
        """One row per candidate considered at every step of ``path``.

        Probabilities are evaluated against the current pheromone state.
        """
        rows = []
        for i in range(len(path) - 1):
            current, chosen = path[i], path[i + 1]
            options = self.policy.transition_probabilities(self.topology, self.pheromones, current)
            for candidate, probability in options:
                rows.append({
                    'step': i,
                    'current_node': current,
                    'candidate_node': candidate,
                    'weight': self.topology.weight(current, candidate),
                    'pheromone': self.pheromones.level(current, candidate),
                    'desirability': self.policy.desirability(self.topology, current, candidate),
                    'probability': probability,
                    'visited': candidate in path[:i + 1],
                    'is_chosen': candidate == chosen
                })
        columns = ['step', 'current_node', 'candidate_node', 'weight', 'pheromone',
                   'desirability', 'probability', 'visited', 'is_chosen']
        return pd.DataFrame(rows, columns=columns)

    def format_report(self, analysis, source, destination):
        """Plain-text summary of an analysis produced by :meth:`analyze_path`."""
        def fmt(path):
            return ' -> '.join(map(str, path)) if path else '(none)'

        summary = [
            ['Ant colony', fmt(analysis['aco_path']), analysis['aco_length'], max(len(analysis['aco_path']) - 1, 0)],
            ['Dijkstra', fmt(analysis['dijkstra_path']), analysis['dijkstra_length'],
             max(len(analysis['dijkstra_path']) - 1, 0)]
        ]
        lines = [
            f"Path analysis from node {source} to node {destination}",
            "",
            tabulate(summary, headers=['Algorithm', 'Path', 'Length', 'Hops'], tablefmt='github'),
            "",
            f"Optimality gap: {analysis['gap']:.2%}" if not math.isnan(analysis['gap']) else "Optimality gap: n/a",
        ]
        if not analysis['steps'].empty:
            lines += ["", "Decisions along the colony path:",
                      tabulate(analysis['steps'], headers='keys', tablefmt='github', showindex=False)]
        return '\n'.join(lines) + '\n'

    def _visualize_path_comparison(self, source, destination, aco_path, dijkstra_path, output_path):
        """Create a network visualization comparing both paths."""
        fig, ax = plt.subplots(figsize=(12, 10))
        pos = nx.spring_layout(self.graph, seed=42)

        nx.draw_networkx_edges(self.graph, pos, alpha=0.2, edge_color='gray', ax=ax)
        nx.draw_networkx_nodes(self.graph, pos, node_size=300, alpha=0.6, node_color='lightblue', ax=ax)
        endpoints = [n for n in (source, destination) if n in self.graph]
        nx.draw_networkx_nodes(self.graph, pos, nodelist=endpoints, node_size=500,
                               node_color=['green' if n == source else 'red' for n in endpoints], ax=ax)

        aco_edges = list(zip(aco_path, aco_path[1:]))
        dijkstra_edges = list(zip(dijkstra_path, dijkstra_path[1:]))
        if aco_edges:
            nx.draw_networkx_edges(self.graph, pos, edgelist=aco_edges, width=2.5,
                                   edge_color='red', arrows=True, ax=ax)
        if dijkstra_edges and aco_path != dijkstra_path:
            nx.draw_networkx_edges(self.graph, pos, edgelist=dijkstra_edges, width=2.5,
                                   alpha=0.7, edge_color='blue', arrows=True, style='dashed', ax=ax)

        nx.draw_networkx_labels(self.graph, pos, font_size=10, ax=ax)
        edge_labels = {(u, v): f"P:{self.pheromones.level(u, v):.1f}\nW:{self.topology.weight(u, v):.1f}"
                       for u, v in aco_edges}
        if edge_labels:
            nx.draw_networkx_edge_labels(self.graph, pos, edge_labels=edge_labels, font_size=8, ax=ax)

        legend_elements = [
            Line2D([0], [0], color='red', lw=2.5, label='Ant colony path'),
            Line2D([0], [0], color='blue', lw=2.5, linestyle='--', label='Dijkstra path'),
            Line2D([0], [0], marker='o', color='w', markerfacecolor='green', markersize=10, label='Source node'),
            Line2D([0], [0], marker='o', color='w', markerfacecolor='red', markersize=10, label='Destination node'),
        ]
        ax.legend(handles=legend_elements, loc='best')
        ax.set_title(f"Path Comparison from Node {source} to Node {destination}")
        ax.axis('off')
        fig.tight_layout()
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)
