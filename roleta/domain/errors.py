"""Failure taxonomy shared by use cases and adapters."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NoEligibleConsultant:
    """Allocation outcome for an empty or fully inactive rotation queue.

    Returned, not raised: it is an expected business outcome.
    """

    natureza: str
    cidade: str


class InfrastructureFault(Exception):
    """Storage unreachable, lock timeout or another backend failure."""


class AuthorizationFault(Exception):
    """Missing or invalid credential, or a write outside the actor's scope."""

    def __init__(self, message: str = "Acesso negado"):
        super().__init__(message)


class NotFound(Exception):
    """Referenced consultant or record does not exist."""


class InvalidInput(ValueError):
    """Caller-supplied value rejected by a use case."""
