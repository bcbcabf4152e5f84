"""Exception hierarchy for the payoff planner."""


class PayoffError(Exception):
    """Base exception for all payoff planner errors."""


class InvalidInputError(PayoffError, ValueError):
    """Raised when debts or payment amounts cannot be simulated."""


class ConfigurationError(PayoffError):
    """Raised when configuration is invalid or missing."""
