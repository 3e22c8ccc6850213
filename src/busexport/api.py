"""Declaration helpers bound to the process-wide interface registry."""

from collections.abc import Callable
from contextlib import AbstractContextManager

from busexport.interface import Handler
from busexport.registry import InterfaceBuilder
from busexport.registry import SignalMember
from busexport.registry import default_registry


def dbus_interface(name: str) -> AbstractContextManager[InterfaceBuilder]:
    """Declare an interface on the default registry.

    :param name: Interface name.
    :returns: Context manager yielding the interface builder.
    """
    return default_registry.interface(name)


def dbus_method(name: str, prototype: str = "") -> Callable[[Handler], Handler]:
    """Declare a method on the interface currently declared on the default registry.

    :param name: Method name.
    :param prototype: Method prototype, such as ``"in a:i, out sum:i"``.
    :returns: Decorator tagging the handler.
    :raises UndefinedInterfaceError: If no interface declaration is active.
    """
    return default_registry.method(name, prototype)


def dbus_signal(name: str, prototype: str = "") -> SignalMember:
    """Declare a signal on the interface currently declared on the default registry.

    :param name: Signal name.
    :param prototype: Signal prototype, such as ``"value:i"``.
    :returns: Class attribute emitting the signal.
    :raises UndefinedInterfaceError: If no interface declaration is active.
    """
    return default_registry.signal(name, prototype)
