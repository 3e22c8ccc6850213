"""Exportable bus objects."""

import weakref
from collections.abc import Callable
from collections.abc import Mapping
from typing import TYPE_CHECKING
from typing import ClassVar

from busexport.dispatcher import dispatch_call
from busexport.emitter import emit as emit_signal
from busexport.errors import NoServiceBoundError
from busexport.interface import Handler
from busexport.interface import Interface
from busexport.interface import Signal
from busexport.message import METHOD_CALL
from busexport.message import Message
from busexport.registry import HANDLER_MEMBER_ATTR
from busexport.registry import InterfaceRegistry
from busexport.registry import default_registry

if TYPE_CHECKING:
    from busexport.service import Service


class BusObject:
    """Base class for objects exported on the bus.

    Subclasses declare interfaces in their class body::

        class Calc(BusObject):
            with dbus_interface("com.example.Calc"):
                @dbus_method("Add", "in a:i, in b:i, out sum:i")
                def add(self, a: int, b: int) -> int:
                    return a + b

                changed = dbus_signal("Changed", "value:i")

    Every instance snapshots the registry at construction; interfaces
    declared later are not visible to it.
    """

    registry: ClassVar[InterfaceRegistry] = default_registry
    check_arguments: ClassVar[bool] = True
    _handler_attrs: ClassVar[dict[tuple[str, str], str]] = {}

    path: str
    intfs: dict[str, Interface]
    _handlers: dict[tuple[str, str], Handler]
    _service_ref: "weakref.ReferenceType[Service] | None"

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Collect handler attributes tagged by the method decorators.

        :param kwargs: Forwarded class keyword arguments.
        """
        super().__init_subclass__(**kwargs)
        handler_attrs: dict[tuple[str, str], str] = {}
        for klass in reversed(cls.__mro__):
            for attr_name, value in vars(klass).items():
                member_keys: object = getattr(value, HANDLER_MEMBER_ATTR, None)
                if isinstance(member_keys, list) is False:
                    continue
                for member_key in member_keys:
                    handler_attrs[member_key] = attr_name
        cls._handler_attrs = handler_attrs

    def __init__(self, path: str) -> None:
        """Initialize an unexported object.

        :param path: Object path, such as ``"/com/example/Calc"``.
        """
        self.path = path
        self.intfs = type(self).registry.snapshot()
        self._handlers = {}
        for member_key, attr_name in type(self)._handler_attrs.items():
            self._handlers[member_key] = getattr(self, attr_name)
        self._service_ref = None

    @property
    def service(self) -> "Service | None":
        """Return the service exporting this object.

        :returns: Service, or ``None`` when unexported or collected.
        """
        if self._service_ref is None:
            return None
        return self._service_ref()

    @service.setter
    def service(self, service: "Service | None") -> None:
        if service is None:
            self._service_ref = None
            return
        self._service_ref = weakref.ref(service)

    def implements(self, interface: Interface, handlers: Mapping[str, Handler] | None = None) -> None:
        """Add one interface to this object only.

        :param interface: Interface descriptor.
        :param handlers: Optional mapping of method name to callable.
        """
        self.intfs[interface.name] = interface
        if handlers is None:
            return
        for member_name, handler in handlers.items():
            self.bind_handler(interface.name, member_name, handler)

    def bind_handler(self, interface_name: str, member_name: str, handler: Handler) -> None:
        """Bind a callable as the handler of one method.

        :param interface_name: Interface name.
        :param member_name: Method name.
        :param handler: Callable receiving the call arguments positionally.
        """
        self._handlers[(interface_name, member_name)] = handler

    def lookup_handler(self, interface_name: str, member_name: str) -> Callable[..., object] | None:
        """Return the handler bound to one method.

        :param interface_name: Interface name.
        :param member_name: Method name.
        :returns: Handler or ``None``.
        """
        return self._handlers.get((interface_name, member_name))

    def send(self, message: Message) -> None:
        """Hand one outbound message to the exporting service's transport.

        :param message: Outbound message.
        :raises NoServiceBoundError: If this object is not exported.
        """
        service: Service | None = self.service
        if service is None:
            raise NoServiceBoundError(f"Object {self.path} is not exported by any service")
        service.bus.send(message)

    def dispatch(self, message: Message) -> Message | None:
        """Handle one inbound message addressed to this object.

        Only method calls are handled; other message kinds are ignored.

        :param message: Inbound message.
        :returns: Sent reply or error message, ``None`` for ignored messages.
        :raises NoServiceBoundError: If this object is not exported.
        """
        if message.message_type != METHOD_CALL:
            return None
        reply: Message = dispatch_call(self, message)
        self.send(reply)
        return reply

    def emit(self, interface: Interface | str, signal: Signal, *args: object) -> Message:
        """Emit one signal from this object.

        :param interface: Interface descriptor or name.
        :param signal: Signal descriptor.
        :param args: Signal argument values.
        :returns: Sent signal message.
        :raises NoServiceBoundError: If this object is not exported.
        """
        return emit_signal(self, interface, signal, args)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"
