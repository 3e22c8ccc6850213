"""Build and send signal messages on behalf of exported objects."""

from typing import Protocol

from busexport.errors import InvalidArgumentsError
from busexport.interface import Interface
from busexport.interface import Signal
from busexport.message import Message


class Emitting(Protocol):
    """What the emitter needs from an exported object."""

    path: str

    def send(self, message: Message) -> None:
        ...


def build_signal(path: str, interface: Interface | str, signal: Signal, args: tuple[object, ...]) -> Message:
    """Build one signal message.

    :param path: Emitting object path.
    :param interface: Interface descriptor or name.
    :param signal: Signal descriptor.
    :param args: Signal argument values, one per declared argument.
    :returns: Signal message.
    :raises InvalidArgumentsError: If the argument count does not match.
    """
    interface_name: str = interface if isinstance(interface, str) is True else interface.name
    expected_count: int = len(signal.params)
    actual_count: int = len(args)
    if expected_count != actual_count:
        raise InvalidArgumentsError(
            f"Signal {interface_name}.{signal.name} expects {expected_count} argument(s), got {actual_count}"
        )
    message: Message = Message.signal(path, interface_name, signal.name)
    for argument, value in zip(signal.params, args):
        message.add_param(argument.signature, value)
    return message


def emit(source: Emitting, interface: Interface | str, signal: Signal, args: tuple[object, ...]) -> Message:
    """Build a signal from ``source`` and hand it to its transport.

    :param source: Emitting object.
    :param interface: Interface descriptor or name.
    :param signal: Signal descriptor.
    :param args: Signal argument values.
    :returns: Sent signal message.
    :raises NoServiceBoundError: If ``source`` is not exported.
    """
    message: Message = build_signal(source.path, interface, signal, args)
    source.send(message)
    return message
