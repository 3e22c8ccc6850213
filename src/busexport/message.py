"""Message values exchanged with the transport layer.

Marshalling to bytes belongs to the transport; this module only models the
header fields and the ordered ``(signature, value)`` body the dispatcher
reads and writes.
"""

import itertools
import threading
from typing import Literal

MessageType = Literal["method_call", "method_return", "error", "signal"]
METHOD_CALL: MessageType = "method_call"
METHOD_RETURN: MessageType = "method_return"
ERROR: MessageType = "error"
SIGNAL: MessageType = "signal"

_SERIAL_LOCK: threading.Lock = threading.Lock()
_SERIALS: "itertools.count[int]" = itertools.count(1)


def _next_serial() -> int:
    """Allocate the next process-wide message serial.

    :returns: Positive serial number.
    """
    with _SERIAL_LOCK:
        return next(_SERIALS)


class Message:
    """One bus message with header fields and a typed body."""

    message_type: MessageType
    serial: int
    reply_serial: int | None
    sender: str | None
    destination: str | None
    path: str | None
    interface: str | None
    member: str | None
    error_name: str | None
    params: list[tuple[str, object]]

    def __init__(
        self,
        message_type: MessageType,
        path: str | None = None,
        interface: str | None = None,
        member: str | None = None,
        sender: str | None = None,
        destination: str | None = None,
        serial: int | None = None,
    ) -> None:
        """Initialize a message.

        :param message_type: Message kind.
        :param path: Object path.
        :param interface: Interface name.
        :param member: Method or signal name.
        :param sender: Unique name of the sending connection.
        :param destination: Unique or well-known name of the receiver.
        :param serial: Explicit serial; allocated when omitted.
        """
        self.message_type = message_type
        if serial is None:
            serial = _next_serial()
        self.serial = serial
        self.reply_serial = None
        self.sender = sender
        self.destination = destination
        self.path = path
        self.interface = interface
        self.member = member
        self.error_name = None
        self.params = []

    @classmethod
    def method_call(
        cls,
        path: str,
        interface: str,
        member: str,
        params: list[tuple[str, object]] | None = None,
        sender: str | None = None,
        destination: str | None = None,
    ) -> "Message":
        """Build a method call message.

        :param path: Target object path.
        :param interface: Target interface name.
        :param member: Method name.
        :param params: Ordered ``(signature, value)`` body.
        :param sender: Caller unique name.
        :param destination: Callee bus name.
        :returns: Call message.
        """
        message: Message = cls(METHOD_CALL, path, interface, member, sender=sender, destination=destination)
        if params is not None:
            for signature, value in params:
                message.add_param(signature, value)
        return message

    @classmethod
    def reply_to(cls, original: "Message") -> "Message":
        """Build an empty method return correlated with ``original``.

        :param original: Inbound call message.
        :returns: Method return message.
        """
        reply: Message = cls(METHOD_RETURN, destination=original.sender)
        reply.reply_serial = original.serial
        return reply

    @classmethod
    def error(cls, original: "Message", error_name: str, description: str | None = None) -> "Message":
        """Build an error reply correlated with ``original``.

        :param original: Inbound call message.
        :param error_name: Reverse-DNS error name.
        :param description: Optional human-readable description, sent as one string.
        :returns: Error message.
        """
        reply: Message = cls(ERROR, destination=original.sender)
        reply.reply_serial = original.serial
        reply.error_name = error_name
        if description is not None:
            reply.add_param("s", description)
        return reply

    @classmethod
    def signal(cls, path: str, interface: str, member: str) -> "Message":
        """Build an empty signal message.

        :param path: Emitting object path.
        :param interface: Interface name.
        :param member: Signal name.
        :returns: Signal message.
        """
        return cls(SIGNAL, path, interface, member)

    def add_param(self, signature: str, value: object) -> None:
        """Append one typed value to the body.

        :param signature: Type signature of the value.
        :param value: Value.
        """
        self.params.append((signature, value))

    @property
    def signature(self) -> str:
        """Return the concatenated body signature.

        :returns: Body signature, ``""`` for an empty body.
        """
        return "".join(signature for signature, _ in self.params)

    @property
    def values(self) -> list[object]:
        """Return the body values in order.

        :returns: Body values.
        """
        return [value for _, value in self.params]

    @property
    def description(self) -> str | None:
        """Return the error description of an error message.

        :returns: First string body value, or ``None``.
        """
        if self.message_type != ERROR:
            return None
        if len(self.params) == 0:
            return None
        first: object = self.params[0][1]
        if isinstance(first, str) is False:
            return None
        return first

    def __repr__(self) -> str:
        return (
            f"Message({self.message_type}, serial={self.serial}, path={self.path!r}, "
            f"interface={self.interface!r}, member={self.member!r}, error_name={self.error_name!r}, "
            f"params={self.params!r})"
        )
