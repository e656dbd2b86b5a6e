"""Email channel port.

GameVault sends every email through one long-lived channel per process,
picked by ``notifications.channel.get_email_channel``. Adapters never raise
for delivery problems; they answer with a ``DispatchResult`` and the mailer
writes it to the delivery log.

Lifecycle: the channel is created on first use and lives until
``reset_channels()`` runs at application shutdown (or between tests). That
is the only caller of ``close()``; an adapter holding a connection releases
it there, and must reopen it transparently if ``send`` is called again.
"""

from abc import ABC, abstractmethod
from typing import NotRequired, TypedDict


class DispatchResult(TypedDict):
    message_id: str | None
    status: str  # "sent" or "failed"
    error: NotRequired[str]


class EmailPort(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> DispatchResult:
        """Deliver one message with a plain-text body and an optional HTML alternative."""
        ...

    def close(self) -> None:
        """Release the transport. Stateless adapters have nothing to do."""
        return None
