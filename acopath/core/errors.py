class AcoPathError(Exception):
    """Base class for all errors raised by acopath."""


class InvalidEdge(AcoPathError, ValueError):
    """Raised when an edge cannot be inserted into the topology.

    The topology and the pheromone table are left unchanged.
    """


class InvalidConfiguration(AcoPathError, ValueError):
    """Raised for tuning constants the colony cannot work with.

    Non-positive ant or iteration counts are not errors: they fall back
    to the defaults.
    """


class TopologyLoadError(AcoPathError):
    """Raised when a topology description cannot be read or parsed."""
