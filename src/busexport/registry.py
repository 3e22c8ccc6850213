"""Process-wide catalog of interface descriptors and the declaration scope."""

import contextlib
import logging
import threading
from collections.abc import Callable
from collections.abc import Iterator
from typing import Literal

from busexport.errors import InterfaceRedeclaredError
from busexport.errors import UndefinedInterfaceError
from busexport.interface import Handler
from busexport.interface import Interface
from busexport.interface import Method
from busexport.interface import Signal
from busexport.message import Message

logger: logging.Logger = logging.getLogger(__name__)

RedeclarePolicy = Literal["replace", "reopen", "reject"]
HANDLER_MEMBER_ATTR: str = "__busexport_member__"


def _validate_redeclare_policy(redeclare_policy: str) -> RedeclarePolicy:
    """Validate one redeclaration policy string.

    :param redeclare_policy: Requested policy.
    :returns: Validated policy.
    :raises ValueError: If the policy is unsupported.
    """
    allowed_policies: set[str] = {"replace", "reopen", "reject"}
    is_allowed: bool = redeclare_policy in allowed_policies
    if is_allowed is False:
        raise ValueError(
            "redeclare_policy must be one of: "
            + ", ".join(sorted(allowed_policies))
        )
    return redeclare_policy  # type: ignore[return-value]


class SignalMember:
    """Class attribute exposing a declared signal as a variadic emitter.

    Accessed on an instance it returns a callable that emits the signal from
    that instance; accessed on the class it returns itself.
    """

    interface: Interface
    signal: Signal

    def __init__(self, interface: Interface, signal: Signal) -> None:
        """Initialize a signal member.

        :param interface: Interface declaring the signal.
        :param signal: Signal descriptor.
        """
        self.interface = interface
        self.signal = signal

    def __get__(self, instance: object, owner: type | None = None) -> object:
        if instance is None:
            return self
        return _BoundSignal(instance, self.interface, self.signal)


class _BoundSignal:
    """Call wrapper emitting one signal from one object."""

    _owner: object
    _interface: Interface
    _signal: Signal

    def __init__(self, owner: object, interface: Interface, signal: Signal) -> None:
        """Initialize a bound signal.

        :param owner: Emitting object; must provide ``emit``.
        :param interface: Interface declaring the signal.
        :param signal: Signal descriptor.
        """
        self._owner = owner
        self._interface = interface
        self._signal = signal

    def __call__(self, *args: object) -> Message:
        """Emit the signal with ``args``.

        :param args: Signal argument values.
        :returns: Sent signal message.
        """
        emit: Callable[..., Message] = getattr(self._owner, "emit")
        return emit(self._interface, self._signal, *args)


class InterfaceBuilder:
    """Handle for one active interface declaration."""

    _registry: "InterfaceRegistry"
    interface: Interface

    def __init__(self, registry: "InterfaceRegistry", interface: Interface) -> None:
        """Initialize a builder.

        :param registry: Owning registry.
        :param interface: Interface under declaration.
        """
        self._registry = registry
        self.interface = interface

    @property
    def name(self) -> str:
        """Return the interface name.

        :returns: Interface name.
        """
        return self.interface.name

    def method(self, name: str, prototype: str = "") -> Callable[[Handler], Handler]:
        """Declare a method and tag the decorated function as its handler.

        :param name: Method name.
        :param prototype: Method prototype.
        :returns: Decorator returning the function unchanged.
        """
        return self._registry.method(name, prototype)

    def signal(self, name: str, prototype: str = "") -> SignalMember:
        """Declare a signal.

        :param name: Signal name.
        :param prototype: Signal prototype.
        :returns: Class attribute that emits the signal.
        """
        return self._registry.signal(name, prototype)


class InterfaceRegistry:
    """Catalog of interface descriptors keyed by interface name.

    Declarations are serialized by a reentrant lock; the current declaration
    target is only visible to the thread holding it.
    """

    _interfaces: dict[str, Interface]
    _current: Interface | None
    _lock: threading.RLock
    _redeclare_policy: RedeclarePolicy

    def __init__(self, redeclare_policy: str = "replace") -> None:
        """Initialize an empty registry.

        :param redeclare_policy: What declaring an existing name does:
            ``"replace"`` starts a fresh descriptor, ``"reopen"`` extends the
            existing one, ``"reject"`` raises.
        :raises ValueError: If the policy is unsupported.
        """
        self._interfaces = {}
        self._current = None
        self._lock = threading.RLock()
        self._redeclare_policy = _validate_redeclare_policy(redeclare_policy)

    @property
    def redeclare_policy(self) -> RedeclarePolicy:
        """Return the redeclaration policy.

        :returns: Policy string.
        """
        return self._redeclare_policy

    @contextlib.contextmanager
    def interface(self, name: str) -> Iterator[InterfaceBuilder]:
        """Declare one interface for the duration of a ``with`` block.

        A nested declaration in the same thread restores the enclosing
        declaration target when it exits.

        :param name: Interface name.
        :yields: Builder bound to the interface.
        :raises InterfaceRedeclaredError: If the policy is ``"reject"`` and
            ``name`` already exists.
        """
        with self._lock:
            existing: Interface | None = self._interfaces.get(name)
            interface: Interface
            if existing is None:
                interface = Interface(name)
            elif self._redeclare_policy == "reopen":
                interface = existing
            elif self._redeclare_policy == "reject":
                raise InterfaceRedeclaredError(f"Interface {name!r} is already declared")
            else:
                logger.debug("Replacing interface %s", name)
                interface = Interface(name)
            self._interfaces[name] = interface
            enclosing: Interface | None = self._current
            self._current = interface
            try:
                yield InterfaceBuilder(self, interface)
            finally:
                self._current = enclosing

    def declare_interface(self, name: str, body: Callable[[InterfaceBuilder], object]) -> Interface:
        """Declare one interface by running ``body`` inside the declaration scope.

        :param name: Interface name.
        :param body: Callable issuing member definitions.
        :returns: Declared interface descriptor.
        """
        with self.interface(name) as builder:
            body(builder)
        return builder.interface

    def _require_current(self) -> Interface:
        """Return the interface under declaration.

        :returns: Current interface.
        :raises UndefinedInterfaceError: If no declaration is active.
        """
        current: Interface | None = self._current
        if current is None:
            raise UndefinedInterfaceError("Members must be defined inside an interface declaration")
        return current

    def define_method(self, name: str, prototype: str = "") -> Method:
        """Parse and register one method under the current interface.

        :param name: Method name.
        :param prototype: Method prototype.
        :returns: Method descriptor.
        :raises UndefinedInterfaceError: If no declaration is active.
        """
        with self._lock:
            current: Interface = self._require_current()
            return current.define_method(name, prototype)

    def define_signal(self, name: str, prototype: str = "") -> Signal:
        """Parse and register one signal under the current interface.

        :param name: Signal name.
        :param prototype: Signal prototype.
        :returns: Signal descriptor.
        :raises UndefinedInterfaceError: If no declaration is active.
        """
        with self._lock:
            current: Interface = self._require_current()
            return current.define_signal(name, prototype)

    def method(self, name: str, prototype: str = "") -> Callable[[Handler], Handler]:
        """Register a method and tag the decorated function as its handler.

        The method is registered when this is called, not when the decorator
        is applied.

        :param name: Method name.
        :param prototype: Method prototype.
        :returns: Decorator returning the function unchanged.
        :raises UndefinedInterfaceError: If no declaration is active.
        """
        with self._lock:
            interface_name: str = self._require_current().name
            self.define_method(name, prototype)

        def decorator(handler: Handler) -> Handler:
            member_keys: list[tuple[str, str]] = getattr(handler, HANDLER_MEMBER_ATTR, [])
            setattr(handler, HANDLER_MEMBER_ATTR, [*member_keys, (interface_name, name)])
            return handler

        return decorator

    def signal(self, name: str, prototype: str = "") -> SignalMember:
        """Register a signal and return its emitting class attribute.

        :param name: Signal name.
        :param prototype: Signal prototype.
        :returns: Signal member.
        :raises UndefinedInterfaceError: If no declaration is active.
        """
        with self._lock:
            current: Interface = self._require_current()
            signal: Signal = current.define_signal(name, prototype)
        return SignalMember(current, signal)

    def get(self, name: str) -> Interface | None:
        """Return one interface descriptor.

        :param name: Interface name.
        :returns: Descriptor or ``None``.
        """
        return self._interfaces.get(name)

    def names(self) -> list[str]:
        """Return declared interface names.

        :returns: Sorted interface names.
        """
        return sorted(self._interfaces)

    def snapshot(self) -> dict[str, Interface]:
        """Return a shallow copy of the interface map.

        :returns: New dict sharing the descriptor values.
        """
        with self._lock:
            return dict(self._interfaces)

    def __contains__(self, name: object) -> bool:
        return name in self._interfaces

    def __len__(self) -> int:
        return len(self._interfaces)


default_registry: InterfaceRegistry = InterfaceRegistry()
