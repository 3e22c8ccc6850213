"""Public package API for busexport."""

from busexport.api import dbus_interface
from busexport.api import dbus_method
from busexport.api import dbus_signal
from busexport.errors import BusError
from busexport.errors import BusExportError
from busexport.errors import InterfaceRedeclaredError
from busexport.errors import InvalidArgumentsError
from busexport.errors import InvalidPrototypeError
from busexport.errors import NoServiceBoundError
from busexport.errors import PathInUseError
from busexport.errors import UndefinedInterfaceError
from busexport.exportable import BusObject
from busexport.interface import Interface
from busexport.interface import Method
from busexport.interface import Signal
from busexport.message import Message
from busexport.registry import InterfaceRegistry
from busexport.registry import default_registry
from busexport.results import ApplicationFault
from busexport.results import InternalFault
from busexport.results import Success
from busexport.service import Service

__all__: list[str] = [
    "dbus_interface",
    "dbus_method",
    "dbus_signal",
    "default_registry",
    "ApplicationFault",
    "BusError",
    "BusExportError",
    "BusObject",
    "Interface",
    "InterfaceRedeclaredError",
    "InterfaceRegistry",
    "InternalFault",
    "InvalidArgumentsError",
    "InvalidPrototypeError",
    "Message",
    "Method",
    "NoServiceBoundError",
    "PathInUseError",
    "Service",
    "Signal",
    "Success",
    "UndefinedInterfaceError",
]
