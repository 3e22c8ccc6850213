"""Tests for routing method calls and building replies."""

import logging

import pytest

from busexport import BusObject
from busexport import Interface
from busexport import Message
from busexport import NoServiceBoundError
from busexport import Service
from busexport.errors import ERROR_FAILED
from busexport.errors import ERROR_INVALID_ARGS
from busexport.errors import ERROR_UNKNOWN_INTERFACE
from busexport.errors import ERROR_UNKNOWN_METHOD
from busexport.message import ERROR
from busexport.message import METHOD_RETURN
from busexport.message import SIGNAL
from tests.fixtures.calculator import CALC_ERROR
from tests.fixtures.calculator import CALC_INTERFACE
from tests.fixtures.calculator import Calculator
from tests.fixtures.recording_bus import RecordingBus

CALLER: str = ":1.42"


def _exported_calculator() -> tuple[Calculator, RecordingBus, Service]:
    """Build a calculator exported on a recording bus.

    :returns: Tuple of ``(calculator, bus, service)``.
    """
    bus: RecordingBus = RecordingBus()
    service: Service = Service("com.example.Calc", bus)
    calculator: Calculator = Calculator()
    service.export(calculator)
    return calculator, bus, service


def _call(member: str, params: list[tuple[str, object]], interface: str = CALC_INTERFACE) -> Message:
    """Build a call to the calculator path.

    :param member: Method name.
    :param params: Typed call body.
    :param interface: Interface name.
    :returns: Call message.
    """
    return Message.method_call("/com/example/Calc", interface, member, params, sender=CALLER)


def test_add_returns_typed_sum() -> None:
    """``Add(2, 3)`` answers with one int32 parameter equal to 5."""
    calculator, bus, _service = _exported_calculator()
    call: Message = _call("Add", [("i", 2), ("i", 3)])
    reply: Message | None = calculator.dispatch(call)

    assert reply is not None
    assert bus.sent == [reply]
    assert reply.message_type == METHOD_RETURN
    assert reply.reply_serial == call.serial
    assert reply.destination == CALLER
    assert reply.params == [("i", 5)]


def test_sequence_result_maps_onto_return_signatures() -> None:
    """A tuple result fills the declared returns in order."""
    calculator, _bus, _service = _exported_calculator()
    reply: Message | None = calculator.dispatch(_call("DivMod", [("i", 17), ("i", 5)]))
    assert reply is not None
    assert reply.params == [("i", 3), ("i", 2)]


def test_returns_truncated_to_shorter_list() -> None:
    """Extra returned values are dropped and a ``None`` result gives no params."""
    calculator, _bus, _service = _exported_calculator()
    pair_reply: Message | None = calculator.dispatch(_call("Pair", []))
    reset_reply: Message | None = calculator.dispatch(_call("Reset", []))
    assert pair_reply is not None
    assert pair_reply.params == [("i", 1)]
    assert reset_reply is not None
    assert reset_reply.message_type == METHOD_RETURN
    assert reset_reply.params == []


def test_unknown_member_yields_unknown_method(caplog: pytest.LogCaptureFixture) -> None:
    """Undeclared ``Subtract`` is reported with interface and member."""
    calculator, bus, _service = _exported_calculator()
    with caplog.at_level(logging.WARNING, logger="busexport.dispatcher"):
        reply: Message | None = calculator.dispatch(_call("Subtract", [("i", 2), ("i", 3)]))

    assert reply is not None
    assert bus.sent == [reply]
    assert reply.message_type == ERROR
    assert reply.error_name == "org.freedesktop.DBus.Error.UnknownMethod"
    assert reply.error_name == ERROR_UNKNOWN_METHOD
    assert reply.description == "com.example.Calc Subtract"
    assert "Subtract" in caplog.text


def test_unknown_interface_yields_unknown_interface(caplog: pytest.LogCaptureFixture) -> None:
    """Calls on unexported interfaces name the interface."""
    calculator, _bus, _service = _exported_calculator()
    with caplog.at_level(logging.WARNING, logger="busexport.dispatcher"):
        reply: Message | None = calculator.dispatch(_call("Add", [], interface="com.example.Nope"))

    assert reply is not None
    assert reply.error_name == ERROR_UNKNOWN_INTERFACE
    assert reply.description == "com.example.Nope"
    assert "com.example.Nope" in caplog.text


def test_bus_error_is_forwarded_verbatim() -> None:
    """A handler's named error becomes the error reply unchanged."""
    calculator, _bus, _service = _exported_calculator()
    reply: Message | None = calculator.dispatch(_call("DivMod", [("i", 1), ("i", 0)]))
    assert reply is not None
    assert reply.error_name == CALC_ERROR
    assert reply.description == "cannot divide 1 by zero"


def test_returned_application_fault_is_forwarded() -> None:
    """Handlers may return a fault value instead of raising."""
    calculator, _bus, _service = _exported_calculator()
    fault_reply: Message | None = calculator.dispatch(_call("Checked", [("i", -1)]))
    ok_reply: Message | None = calculator.dispatch(_call("Checked", [("i", 4)]))
    assert fault_reply is not None
    assert fault_reply.error_name == CALC_ERROR
    assert fault_reply.description == "negative input"
    assert ok_reply is not None
    assert ok_reply.params == [("i", 4)]


def test_unclassified_error_becomes_failed_and_dispatch_continues(caplog: pytest.LogCaptureFixture) -> None:
    """Any other exception yields ``Failed`` with kind, message and trace."""
    calculator, bus, _service = _exported_calculator()
    with caplog.at_level(logging.ERROR, logger="busexport.dispatcher"):
        failed: Message | None = calculator.dispatch(_call("Divide", [("i", 1), ("i", 0)]))

    assert failed is not None
    assert failed.error_name == ERROR_FAILED
    description: str | None = failed.description
    assert description is not None
    assert description.startswith("ZeroDivisionError: division by zero\n==== Backtrace ====\n")
    assert "Traceback" in description
    assert "ZeroDivisionError" in caplog.text

    after: Message | None = calculator.dispatch(_call("Divide", [("i", 6), ("i", 3)]))
    assert after is not None
    assert after.params == [("d", 2.0)]
    assert len(bus.sent) == 2


def test_argument_count_mismatch_yields_invalid_args() -> None:
    """Calls with the wrong arity are refused before the handler runs."""
    calculator, _bus, _service = _exported_calculator()
    reply: Message | None = calculator.dispatch(_call("Add", [("i", 2)]))
    assert reply is not None
    assert reply.error_name == ERROR_INVALID_ARGS
    assert "expects 2 argument(s)" in (reply.description or "")


def test_argument_signature_mismatch_yields_invalid_args() -> None:
    """Calls with the wrong types are refused."""
    calculator, _bus, _service = _exported_calculator()
    reply: Message | None = calculator.dispatch(_call("Add", [("i", 2), ("s", "3")]))
    assert reply is not None
    assert reply.error_name == ERROR_INVALID_ARGS
    assert "'ii'" in (reply.description or "")


def test_argument_check_can_be_disabled() -> None:
    """Without the check the handler error surfaces as ``Failed``."""

    class LenientCalculator(Calculator):
        """Calculator skipping the argument check."""

        check_arguments = False

    bus: RecordingBus = RecordingBus()
    service: Service = Service("com.example.Calc", bus)
    calculator: LenientCalculator = LenientCalculator()
    service.export(calculator)
    reply: Message | None = calculator.dispatch(_call("Add", [("i", 2)]))
    assert reply is not None
    assert reply.error_name == ERROR_FAILED
    assert (reply.description or "").startswith("TypeError: ")


def test_non_call_messages_are_ignored() -> None:
    """Signals and replies addressed to an object produce nothing."""
    calculator, bus, _service = _exported_calculator()
    signal: Message = Message.signal("/com/example/Calc", CALC_INTERFACE, "Add")
    assert calculator.dispatch(signal) is None
    assert signal.message_type == SIGNAL
    assert bus.sent == []


def test_dispatch_without_service_is_fatal() -> None:
    """An unexported object cannot answer calls."""
    calculator: Calculator = Calculator()
    with pytest.raises(NoServiceBoundError):
        calculator.dispatch(_call("Add", [("i", 2), ("i", 3)]))


def test_implements_adds_interface_with_handlers() -> None:
    """Objects can be assembled without class-level declarations."""
    echo: Interface = Interface("com.example.Echo")
    echo.define_method("Echo", "in text:s, out text:s")
    echo.define_method("Silent", "in text:s")

    bus: RecordingBus = RecordingBus()
    service: Service = Service("com.example.Echo", bus)
    node: BusObject = BusObject("/echo")
    node.implements(echo, {"Echo": lambda text: text.upper()})
    service.export(node)

    reply: Message | None = node.dispatch(Message.method_call("/echo", "com.example.Echo", "Echo", [("s", "hi")]))
    assert reply is not None
    assert reply.params == [("s", "HI")]

    unbound: Message | None = node.dispatch(Message.method_call("/echo", "com.example.Echo", "Silent", [("s", "x")]))
    assert unbound is not None
    assert unbound.error_name == ERROR_FAILED
    assert (unbound.description or "").startswith("NotImplementedError: ")

    node.bind_handler("com.example.Echo", "Silent", lambda text: None)
    bound: Message | None = node.dispatch(Message.method_call("/echo", "com.example.Echo", "Silent", [("s", "x")]))
    assert bound is not None
    assert bound.message_type == METHOD_RETURN


def test_implements_is_per_instance() -> None:
    """Adding an interface to one object leaves other objects unchanged."""
    first: Calculator = Calculator("/first")
    second: Calculator = Calculator("/second")
    first.implements(Interface("com.example.Extra"))
    assert "com.example.Extra" in first.intfs
    assert "com.example.Extra" not in second.intfs


def test_subclass_override_is_dispatched() -> None:
    """Handlers resolve through normal attribute lookup."""

    class DoublingCalculator(Calculator):
        """Calculator whose ``Add`` doubles the sum."""

        def add(self, a: int, b: int) -> int:
            return 2 * (a + b)

    bus: RecordingBus = RecordingBus()
    service: Service = Service("com.example.Calc", bus)
    calculator: DoublingCalculator = DoublingCalculator()
    service.export(calculator)
    reply: Message | None = calculator.dispatch(_call("Add", [("i", 2), ("i", 3)]))
    assert reply is not None
    assert reply.params == [("i", 10)]
