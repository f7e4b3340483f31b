"""
Exception hierarchy for projective reconstruction.

Recoverable failures (a seed that cannot be bootstrapped, a view that cannot be
added) are reported through return values and status codes. The exceptions below
are reserved for conditions the caller has to fix.
"""


class ReconstructionError(Exception):
    """Base class for all errors raised by this package"""
    pass


class ConfigurationError(ReconstructionError, ValueError):
    """A configuration value is out of its valid range"""
    pass


class NeighborSelectionConfigError(ReconstructionError, RuntimeError):
    """
    Local neighbor selection reached a state where no view can be removed.

    Almost always means that 'min_neighbors' >= 'max_views' - 1 for a target with
    more candidate views than fit in the local graph.
    """
    pass


class GraphInvariantError(ReconstructionError, AssertionError):
    """Internal bookkeeping of a graph is inconsistent. Indicates a bug."""
    pass
