"""
Exception hierarchy for preparation parameter generation.

Every failure is raised to the caller; no partial results are returned.
"""


class PreparationError(Exception):
    """Base class for all preparation failures."""


class ConfigurationError(PreparationError, ValueError):
    """Invalid caller-supplied configuration, detected before any work starts."""


class GenerationError(PreparationError):
    """Commitment parameter derivation failed."""


class SubtaskError(PreparationError):
    """A generation subtask (Paillier or safe-prime search) failed."""


class SafePrimeSearchError(SubtaskError):
    """Safe-prime search exhausted its attempt budget."""


class PaillierGenerationError(SubtaskError):
    """No valid Paillier prime pair was found within the retry bound."""


class PreparationTimeoutError(SubtaskError):
    """The configured deadline passed before generation completed."""


class PreparationCancelledError(SubtaskError):
    """A sibling task failed and this one was asked to stop."""
