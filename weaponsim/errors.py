"""Exception types raised by the simulator.

Every error here is a configuration fault. Simulations are deterministic and
repeat the same parameters for every combat in a batch, so a fault seen in one
combat recurs in all of them. Callers should abort the batch rather than skip
the failing iteration.
"""


class ConfigurationError(ValueError):
    """Base class for fatal, non-retryable configuration faults."""


class DiceExpressionError(ConfigurationError):
    """A dice expression string could not be parsed."""


class UnknownSizeClassError(ConfigurationError):
    """A target size has no entry in the bleed threshold table."""


class EmptyInputError(ConfigurationError):
    """Statistics were requested over an empty result list."""


class MetricsLifecycleError(ConfigurationError):
    """The metrics engine was used before ``start()`` was called."""
