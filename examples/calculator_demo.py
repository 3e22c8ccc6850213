"""Export a calculator object and drive it through a loopback transport."""

import argparse
import logging
import pathlib
import sys

SERVICE_NAME: str = "com.example.Calc"
OBJECT_PATH: str = "/com/example/Calc"
CALC_INTERFACE: str = "com.example.Calc"


def _ensure_src_path() -> None:
    """Make the repository ``src`` directory importable."""
    repo_root: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
    src_path: str = str(repo_root / "src")
    exists: bool = src_path in sys.path
    if exists is False:
        sys.path.insert(0, src_path)


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments.

    :returns: Parsed CLI arguments.
    """
    parser = argparse.ArgumentParser(description="Call an exported calculator object in-process.")
    parser.add_argument("a", type=int, help="First operand.")
    parser.add_argument("b", type=int, help="Second operand.")
    parser.add_argument("--member", default="Add", help="Method to call (Add, DivMod or anything undeclared).")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def main() -> int:
    """Run the demonstration.

    :returns: Process exit code where ``0`` indicates a method return.
    """
    args: argparse.Namespace = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose is True else logging.WARNING)
    _ensure_src_path()

    from busexport import BusError
    from busexport import BusObject
    from busexport import InterfaceRegistry
    from busexport import Message
    from busexport import Service
    from busexport.message import METHOD_RETURN

    class LoopbackBus:
        """Transport printing every outbound message."""

        def send(self, message: Message) -> None:
            """Print one outbound message.

            :param message: Outbound message.
            """
            print(f"-> {message.message_type} {message.error_name or ''} {message.params}")

    class Calculator(BusObject):
        """Integer calculator."""

        registry = InterfaceRegistry()

        with registry.interface(CALC_INTERFACE):

            @registry.method("Add", "in a:i, in b:i, out sum:i")
            def add(self, a: int, b: int) -> int:
                self.total_changed(a + b, "add")
                return a + b

            @registry.method("DivMod", "in a:i, in b:i, out quotient:i, out remainder:i")
            def div_mod(self, a: int, b: int) -> tuple[int, int]:
                if b == 0:
                    raise BusError("com.example.Calc.Error.DivisionByZero", "b must not be zero")
                return divmod(a, b)

            total_changed = registry.signal("TotalChanged", "total:i, reason:s")

    service: Service = Service(SERVICE_NAME, LoopbackBus())
    calculator: Calculator = Calculator(OBJECT_PATH)
    service.export(calculator)

    call: Message = Message.method_call(
        OBJECT_PATH,
        CALC_INTERFACE,
        str(args.member),
        [("i", int(args.a)), ("i", int(args.b))],
        sender=":1.1",
    )
    print(f"<- method_call {args.member}({args.a}, {args.b})")
    reply: Message | None = service.dispatch(call)
    if reply is not None and reply.message_type == METHOD_RETURN:
        return 0
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
