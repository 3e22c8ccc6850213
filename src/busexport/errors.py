"""Custom error types and wire fault names for busexport."""

ERROR_FAILED: str = "org.freedesktop.DBus.Error.Failed"
ERROR_UNKNOWN_INTERFACE: str = "org.freedesktop.DBus.Error.UnknownInterface"
ERROR_UNKNOWN_METHOD: str = "org.freedesktop.DBus.Error.UnknownMethod"
ERROR_UNKNOWN_OBJECT: str = "org.freedesktop.DBus.Error.UnknownObject"
ERROR_INVALID_ARGS: str = "org.freedesktop.DBus.Error.InvalidArgs"


class BusExportError(Exception):
    """Base class for all busexport errors."""


class UndefinedInterfaceError(BusExportError):
    """Raised when a member is defined outside an interface declaration."""


class InvalidPrototypeError(BusExportError):
    """Raised when a method or signal prototype string cannot be parsed."""


class InterfaceRedeclaredError(BusExportError):
    """Raised when a registry rejects redeclaration of an existing interface."""


class NoServiceBoundError(BusExportError):
    """Raised when an object must talk to the bus but is not exported."""


class PathInUseError(BusExportError):
    """Raised when a service already exports an object at the same path."""


class InvalidArgumentsError(BusExportError):
    """Raised when signal arguments do not match the signal declaration."""


class BusError(BusExportError):
    """Error raised by handlers to answer a call with a named bus error.

    Example::

        @dbus_method("FireError")
        def fire_error(self) -> None:
            raise BusError("com.example.Error.Epic", "epic fail")
    """

    error_name: str
    description: str

    def __init__(self, error_name: str = ERROR_FAILED, description: str = "") -> None:
        """Initialize a named bus error.

        :param error_name: Reverse-DNS error name placed on the wire.
        :param description: Human-readable description placed on the wire.
        """
        self.error_name = error_name
        self.description = description
        super().__init__(f"{error_name}: {description}")
