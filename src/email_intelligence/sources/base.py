"""
Interfaces for the email data collaborators.

The analysis layer only reads email facts and thread history; where they come
from (a mail API, a gateway, a fixture) is up to the implementation.
"""

from abc import ABC, abstractmethod

from email_intelligence.models.input_models import EmailFacts, ThreadMessage


class EmailDataProvider(ABC):
    """Supplies the facts of a single message."""

    @abstractmethod
    async def fetch_email(self, message_id: str) -> EmailFacts:
        """
        Fetch one message.

        Raises:
            UpstreamFetchError: Message missing or source unavailable
        """

    async def close(self) -> None:
        """Release resources. Default implementation does nothing."""


class ThreadDataProvider(ABC):
    """Supplies earlier messages of a thread."""

    @abstractmethod
    async def fetch_thread(self, thread_id: str, max_messages: int) -> list[ThreadMessage]:
        """
        Fetch up to max_messages messages of a thread, oldest first.

        Raises:
            UpstreamFetchError: Thread missing or source unavailable
        """

    async def close(self) -> None:
        """Release resources. Default implementation does nothing."""
