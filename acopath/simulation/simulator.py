import logging
import random
import time

import pandas as pd

logger = logging.getLogger(__name__)


class ColonySimulator:
    """Runs path queries against an ant colony and collects metrics."""

    def __init__(self, colony, seed=None):
        self.colony = colony
        self.topology = colony.topology
        # Only used to pick query pairs; the colony has its own generator
        self.random = random.Random(seed)
        self.metrics = {
            'source': [],
            'destination': [],
            'path_lengths': [],
            'hop_counts': [],
            'convergence_times': [],
            'convergence_iterations': [],
            'successes': []
        }

    def route(self, source, destination):
        """Find a path for one query and record its metrics."""
        result = self.colony.solve(source, destination)

        self.metrics['source'].append(source)
        self.metrics['destination'].append(destination)
        self.metrics['path_lengths'].append(result.best_length if result.found else float('nan'))
        self.metrics['hop_counts'].append(len(result.best_path) - 1 if result.found else 0)
        self.metrics['convergence_times'].append(result.elapsed_sec)
        self.metrics['convergence_iterations'].append(self._convergence_iteration(result))
        self.metrics['successes'].append(result.found)
        return result

    def route_pairs(self, pairs):
        """Route every ``(source, destination)`` pair in turn."""
        return [self.route(source, destination) for source, destination in pairs]

    def run_simulation(self, num_queries=10):
        """Route packets between random distinct node pairs.

        Returns:
            DataFrame with one row per query
        """
        nodes = self.topology.nodes()
        if len(nodes) < 2:
            raise ValueError("Simulation needs a topology with at least two nodes")

        for i in range(num_queries):
            source, destination = self.random.sample(nodes, 2)
            result = self.route(source, destination)
            logger.debug("Query %d: %s -> %s, found=%s", i + 1, source, destination, result.found)

        return self.to_dataframe()

    def to_dataframe(self):
        """Collected metrics as a DataFrame."""
        return pd.DataFrame(self.metrics)

    def summary(self):
        """Aggregate statistics over all routed queries."""
        df = self.to_dataframe()
        found = df[df['successes']]
        return {
            'queries': len(df),
            'success_rate': float(df['successes'].mean()) if len(df) else 0.0,
            'mean_path_length': float(found['path_lengths'].mean()) if len(found) else float('nan'),
            'mean_hop_count': float(found['hop_counts'].mean()) if len(found) else float('nan'),
            'mean_convergence_time': float(df['convergence_times'].mean()) if len(df) else 0.0
        }

    @staticmethod
    def _convergence_iteration(result):
        """First iteration (1-based) at which the final best length was reached, 0 if none."""
        if not result.found:
            return 0
        for i, length in enumerate(result.history_best_lengths):
            if length == result.best_length:
                return i + 1
        return 0
