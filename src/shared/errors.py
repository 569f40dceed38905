"""Error hierarchy shared by every bounded context.

Errors carry a ``messages`` mapping of ``field -> [message, ...]``, the same
shape Protean uses for its own validation errors, so the API layer can render
both uniformly, e.g.::

    raise InvalidTransition({"status": ["Cannot transition from Ready to Received"]})

The hierarchy decides how an error surfaces at the HTTP boundary:

- ``ValidationError``: the request is rejected as invalid. It is also a
  ``protean.exceptions.ValidationError``, so field errors raised by the
  aggregates and rule violations raised by handlers are caught together.
- ``ObjectNotFoundError``: the addressed object is absent (404).
- ``StaleStateError``: a concurrent writer changed the object first (409).
- ``GatewayError``: the payment gateway failed; ``retriable`` tells the caller
  whether trying again can help.
"""

from protean.exceptions import ObjectNotFoundError as ProteanObjectNotFoundError
from protean.exceptions import ValidationError as ProteanValidationError


class DomainError(Exception):
    def __init__(self, messages: dict[str, list[str]] | str | None = None) -> None:
        if messages is None:
            messages = {}
        elif isinstance(messages, str):
            messages = {"_entity": [messages]}
        self.messages = messages
        super().__init__(messages)

    def __str__(self) -> str:
        parts = [f"{field}: {'; '.join(msgs)}" for field, msgs in self.messages.items()]
        return ", ".join(parts) or type(self).__name__


class ValidationError(DomainError, ProteanValidationError):
    """The requested change breaks a domain rule."""


class ObjectNotFoundError(DomainError, ProteanObjectNotFoundError):
    """The addressed object does not exist."""


class StaleStateError(DomainError):
    """A conditional update lost against a concurrent writer."""


class GatewayError(DomainError):
    """Failure talking to the external payment gateway."""

    retriable = False
