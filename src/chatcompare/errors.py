"""Exceptions raised for whole-batch conditions.

Per-target failures are never raised; they travel as ``Outcome.error``.
"""

from typing import Iterable


class ChatCompareError(Exception):
    """Base class for all chatcompare errors."""


class ConfigurationError(ChatCompareError):
    """The application is not configured well enough to send anything."""


class CredentialRequiredError(ConfigurationError):
    """No credential is configured, so nothing was sent."""

    def __init__(self, message: str = "API key required"):
        super().__init__(message)


class TargetBusyError(ChatCompareError):
    """One or more targets still have a request in flight."""

    def __init__(self, targets: Iterable[str]):
        self.targets = list(targets)
        super().__init__(f"Targets still loading: {', '.join(self.targets)}")


class DispatchError(ChatCompareError):
    """The concurrent send could not be carried out at all."""
