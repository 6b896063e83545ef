"""Email channel port: what the notification handlers need from a mail sender."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        sender: str | None = None,
        attachments: list[dict] | None = None,
    ) -> dict:
        """Deliver one message.

        Args:
            attachments: Dicts with ``filename`` and ``content``.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
