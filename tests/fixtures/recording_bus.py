"""In-memory transport that records outbound messages."""

from busexport.message import Message


class RecordingBus:
    """Transport double collecting every sent message."""

    sent: list[Message]

    def __init__(self) -> None:
        """Initialize an empty recording."""
        self.sent = []

    def send(self, message: Message) -> None:
        """Record one outbound message.

        :param message: Outbound message.
        """
        self.sent.append(message)

    @property
    def last(self) -> Message:
        """Return the most recent message.

        :returns: Last sent message.
        """
        return self.sent[-1]
