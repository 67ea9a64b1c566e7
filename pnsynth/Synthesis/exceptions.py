from __future__ import annotations


class SynthesisError(RuntimeError):
    """Base class for all synthesis-specific errors."""


class ConfigurationError(SynthesisError):
    """Raised when a requested configuration cannot be evaluated for the input."""


class PropertyError(ConfigurationError, ValueError):
    """Raised for malformed or inconsistent net property configurations."""


class MissingLocationError(ConfigurationError):
    """Raised when event locations are missing, partial or contradictory."""


class InvalidTransitionSystemError(SynthesisError):
    """Raised when a transition system cannot be synthesised at all (no initial state)."""


class RegionInvariantError(SynthesisError):
    """Raised when an internal region invariant is violated (programming error)."""


class NotCombinableError(SynthesisError):
    """Raised when a linear combination of regions is not admissible."""


class SolverError(SynthesisError):
    """Raised when the MILP backend reports neither a solution nor infeasibility."""


class SynthesisCancelled(SynthesisError):
    """Raised when a synthesis run is abandoned on an external cancellation signal."""
