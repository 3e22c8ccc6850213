"""Route one inbound method call to its handler and build the reply."""

import logging
import traceback
from collections.abc import Callable
from typing import Protocol

from busexport.errors import ERROR_FAILED
from busexport.errors import ERROR_INVALID_ARGS
from busexport.errors import ERROR_UNKNOWN_INTERFACE
from busexport.errors import ERROR_UNKNOWN_METHOD
from busexport.interface import Interface
from busexport.interface import Method
from busexport.message import Message
from busexport.results import ApplicationFault
from busexport.results import CallResult
from busexport.results import InternalFault
from busexport.results import Success
from busexport.results import from_exception
from busexport.results import to_call_result

logger: logging.Logger = logging.getLogger(__name__)


class Dispatchable(Protocol):
    """What the dispatcher needs from an exported object."""

    path: str
    intfs: dict[str, Interface]
    check_arguments: bool

    def lookup_handler(self, interface_name: str, member_name: str) -> Callable[..., object] | None:
        ...


def check_call_arguments(method: Method, message: Message) -> str | None:
    """Compare the call body against the declared input arguments.

    :param method: Resolved method descriptor.
    :param message: Inbound call message.
    :returns: Problem description, or ``None`` when the body matches.
    """
    expected_count: int = len(method.params)
    actual_count: int = len(message.params)
    if expected_count != actual_count:
        return (
            f"{method.name} expects {expected_count} argument(s) "
            + f"({method.in_signature!r}), got {actual_count}"
        )
    expected_signature: str = method.in_signature
    actual_signature: str = message.signature
    if expected_signature != actual_signature:
        return f"{method.name} expects signature {expected_signature!r}, got {actual_signature!r}"
    return None


def invoke_handler(target: Dispatchable, interface: Interface, method: Method, message: Message) -> CallResult:
    """Run the bound handler and capture its outcome.

    :param target: Exported object.
    :param interface: Resolved interface.
    :param method: Resolved method.
    :param message: Inbound call message.
    :returns: Call result; exceptions never escape.
    """
    try:
        handler: Callable[..., object] | None = target.lookup_handler(interface.name, method.name)
        if handler is None:
            raise NotImplementedError(f"No handler bound for {interface.name}.{method.name} on {target.path}")
        raw_result: object = handler(*message.values)
        return to_call_result(raw_result)
    except Exception as exc:
        return from_exception(exc)


def result_to_message(message: Message, method: Method, result: CallResult) -> Message:
    """Map one call result onto a reply or error message.

    :param message: Inbound call message.
    :param method: Resolved method descriptor.
    :param result: Handler outcome.
    :returns: Outbound message correlated with ``message``.
    :raises TypeError: If ``result`` is not a known call result variant.
    """
    if isinstance(result, Success) is True:
        reply: Message = Message.reply_to(message)
        for argument, value in zip(method.rets, result.values):
            reply.add_param(argument.signature, value)
        return reply
    if isinstance(result, ApplicationFault) is True:
        return Message.error(message, result.name, result.description)
    if isinstance(result, InternalFault) is True:
        logger.error(
            "Call %s.%s on %s failed: %s: %s",
            message.interface,
            message.member,
            message.path,
            result.kind,
            result.message,
        )
        return Message.error(message, ERROR_FAILED, result.describe())
    raise TypeError(f"Unknown call result variant: {type(result).__name__}")


def dispatch_call(target: Dispatchable, message: Message) -> Message:
    """Resolve ``message`` against ``target`` and produce exactly one reply.

    :param target: Exported object.
    :param message: Inbound method call message.
    :returns: Method return or error message.
    """
    interface_name: str = message.interface or ""
    interface: Interface | None = target.intfs.get(interface_name)
    if interface is None:
        logger.warning("Interface %s not in object %s", interface_name, target.path)
        return Message.error(message, ERROR_UNKNOWN_INTERFACE, interface_name)

    member_name: str = message.member or ""
    method: Method | None = interface.methods.get(member_name)
    if method is None:
        logger.warning("Method %s not in interface %s", member_name, interface_name)
        return Message.error(message, ERROR_UNKNOWN_METHOD, f"{interface_name} {member_name}")

    if target.check_arguments is True:
        problem: str | None = check_call_arguments(method, message)
        if problem is not None:
            logger.warning("Invalid arguments for %s.%s: %s", interface_name, member_name, problem)
            return Message.error(message, ERROR_INVALID_ARGS, problem)

    result: CallResult = invoke_handler(target, interface, method, message)
    try:
        return result_to_message(message, method, result)
    except TypeError as exc:
        fault: InternalFault = InternalFault(type(exc).__name__, str(exc), traceback.format_exc())
        return result_to_message(message, method, fault)
