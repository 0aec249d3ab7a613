import json
import math
import numbers

from ..core.errors import InvalidConfiguration

DEFAULT_CONFIG = {
    'ants': 250,
    'iterations': 150,
    'pheromone_quantity': 100.0,
    'evaporation_rate': 0.5,
    'alpha': 1.0,  # Pheromone importance
    'beta': 5.0,   # Distance importance
    'seed': None,
    'workers': 1
}


class ColonyConfig:
    """Configuration management for ant colony runs."""

    def __init__(self, config_dict=None):
        self.config = DEFAULT_CONFIG.copy()
        if config_dict:
            self._check_keys(config_dict)
            self.config.update(config_dict)

    @classmethod
    def from_json(cls, filepath):
        """Load configuration overrides from a JSON object file."""
        try:
            with open(filepath) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidConfiguration(f"Cannot read configuration from {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"Configuration in {filepath} must be a JSON object")
        return cls(data)

    def get(self, key):
        """Get configuration value."""
        return self.config.get(key)

    def set(self, key, value):
        """Set configuration value."""
        self._check_keys([key])
        self.config[key] = value

    def to_dict(self):
        """Convert to dictionary."""
        return self.config.copy()

    def validate(self):
        """Check the values a colony cannot run with.

        Non-positive ants and iterations are accepted; the colony replaces
        them with its defaults.
        """
        c = self.config
        for key in ('ants', 'iterations', 'workers'):
            if not _is_int(c[key]):
                raise InvalidConfiguration(f"{key} must be an integer, got {c[key]!r}")
        if c['seed'] is not None and not _is_int(c['seed']):
            raise InvalidConfiguration(f"seed must be an integer or null, got {c['seed']!r}")
        for key in ('pheromone_quantity', 'evaporation_rate', 'alpha', 'beta'):
            if not _is_real(c[key]):
                raise InvalidConfiguration(f"{key} must be a finite number, got {c[key]!r}")

        if not 0 < c['evaporation_rate'] < 1:
            raise InvalidConfiguration(f"evaporation_rate must lie in (0, 1), got {c['evaporation_rate']}")
        if c['pheromone_quantity'] <= 0:
            raise InvalidConfiguration(f"pheromone_quantity must be positive, got {c['pheromone_quantity']}")
        if c['alpha'] < 0 or c['beta'] < 0:
            raise InvalidConfiguration("alpha and beta must be non-negative")
        if c['workers'] < 1:
            raise InvalidConfiguration(f"workers must be at least 1, got {c['workers']}")
        return self

    @staticmethod
    def _check_keys(keys):
        unknown = sorted(set(keys) - set(DEFAULT_CONFIG))
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration keys: {', '.join(unknown)}")


def _is_int(value):
    # bool is an int subclass but never a count
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)
