"""Services exporting objects on one bus connection."""

import logging
from typing import Protocol

from busexport.errors import ERROR_UNKNOWN_OBJECT
from busexport.errors import PathInUseError
from busexport.exportable import BusObject
from busexport.interface import Interface
from busexport.introspect import INTROSPECT_MEMBER
from busexport.introspect import INTROSPECTABLE_INTERFACE
from busexport.introspect import object_to_xml
from busexport.message import METHOD_CALL
from busexport.message import Message

logger: logging.Logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Outbound side of a bus connection; marshals and writes messages."""

    def send(self, message: Message) -> None:
        ...


def _normalize_path(path: str) -> str:
    """Strip a trailing slash from every path but the root.

    :param path: Object path.
    :returns: Normalized path.
    """
    if path != "/" and path.endswith("/") is True:
        return path.rstrip("/") or "/"
    return path


class Service:
    """A named service owning a table of exported objects."""

    name: str
    bus: Transport
    _objects: dict[str, BusObject]

    def __init__(self, name: str, bus: Transport) -> None:
        """Initialize a service without exported objects.

        :param name: Well-known bus name, such as ``"com.example.Calc"``.
        :param bus: Transport used for replies and signals.
        """
        self.name = name
        self.bus = bus
        self._objects = {}

    def export(self, obj: BusObject) -> None:
        """Export ``obj`` at its path and bind it to this service.

        :param obj: Object to export.
        :raises PathInUseError: If another object is exported at the same path.
        """
        path: str = _normalize_path(obj.path)
        existing: BusObject | None = self._objects.get(path)
        if existing is not None and existing is not obj:
            raise PathInUseError(f"Path {path} is already exported by {self.name}")
        self._objects[path] = obj
        obj.service = self
        logger.debug("Exported %r on %s", obj, self.name)

    def unexport(self, obj_or_path: BusObject | str) -> BusObject | None:
        """Remove an exported object and unbind it.

        :param obj_or_path: Object or its path.
        :returns: Removed object, or ``None`` when nothing was exported there.
        """
        path: str = obj_or_path if isinstance(obj_or_path, str) is True else obj_or_path.path
        removed: BusObject | None = self._objects.pop(_normalize_path(path), None)
        if removed is None:
            return None
        removed.service = None
        logger.debug("Unexported %r from %s", removed, self.name)
        return removed

    def get_object(self, path: str) -> BusObject | None:
        """Return the object exported at ``path``.

        :param path: Object path.
        :returns: Object or ``None``.
        """
        return self._objects.get(_normalize_path(path))

    def paths(self) -> list[str]:
        """Return exported paths.

        :returns: Sorted paths.
        """
        return sorted(self._objects)

    def child_names(self, path: str) -> list[str]:
        """Return the direct child node names below ``path``.

        :param path: Parent path.
        :returns: Sorted, de-duplicated child names.
        """
        parent: str = _normalize_path(path)
        prefix: str = "/" if parent == "/" else parent + "/"
        names: set[str] = set()
        for exported_path in self._objects:
            if exported_path.startswith(prefix) is False or exported_path == parent:
                continue
            remainder: str = exported_path[len(prefix):]
            names.add(remainder.split("/", 1)[0])
        return sorted(names)

    def introspect(self, path: str) -> str | None:
        """Render the introspection document for ``path``.

        :param path: Object path.
        :returns: XML, or ``None`` when ``path`` is neither exported nor a parent of an export.
        """
        obj: BusObject | None = self.get_object(path)
        children: list[str] = self.child_names(path)
        if obj is None and len(children) == 0:
            return None
        interfaces: list[Interface] = []
        if obj is not None:
            interfaces = list(obj.intfs.values())
        return object_to_xml(_normalize_path(path), interfaces, children)

    def dispatch(self, message: Message) -> Message | None:
        """Route one inbound message to the object at its path.

        :param message: Inbound message.
        :returns: Sent reply or error, ``None`` for ignored messages.
        """
        if message.message_type != METHOD_CALL:
            return None
        path: str = message.path or ""
        is_introspect: bool = (
            message.interface == INTROSPECTABLE_INTERFACE
            and message.member == INTROSPECT_MEMBER
        )
        if is_introspect is True:
            xml: str | None = self.introspect(path)
            if xml is not None:
                reply: Message = Message.reply_to(message)
                reply.add_param("s", xml)
                self.bus.send(reply)
                return reply

        obj: BusObject | None = self.get_object(path)
        if obj is None:
            logger.warning("No object exported at %s on %s", path, self.name)
            error: Message = Message.error(message, ERROR_UNKNOWN_OBJECT, path)
            self.bus.send(error)
            return error
        return obj.dispatch(message)
