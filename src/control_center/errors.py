"""Failure types raised at the gateway boundary."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """Captured failure detail from a store read or orchestrator call."""

    message: str
    output: str = ""
    returncode: int | None = None

    @property
    def summary(self) -> str:
        """First line of the message, for one-line displays."""
        lines = self.message.strip().splitlines()
        return lines[0] if lines else "unknown error"

    def __str__(self) -> str:
        if self.output.strip():
            return f"{self.message}\nOutput: {self.output.rstrip()}"
        return self.message


class GatewayError(Exception):
    """Base for failures reported by an external collaborator."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic


class StoreError(GatewayError):
    """The task document could not be read."""


class StoreMissingError(StoreError):
    """The task document does not exist or cannot be opened."""


class StoreMalformedError(StoreError):
    """The task document exists but its content is invalid."""


class CommandError(GatewayError):
    """The orchestrator script failed or could not be launched."""
