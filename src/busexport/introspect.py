"""D-Bus introspection documents for exported objects."""

import xml.etree.ElementTree as ElementTree
from collections.abc import Iterable

from busexport.interface import Interface

INTROSPECTABLE_INTERFACE: str = "org.freedesktop.DBus.Introspectable"
INTROSPECT_MEMBER: str = "Introspect"
DOCTYPE: str = (
    '<!DOCTYPE node PUBLIC "-//freedesktop//DTD D-BUS Object Introspection 1.0//EN"\n'
    '"http://www.freedesktop.org/standards/dbus/1.0/introspect.dtd">\n'
)


def _add_arg(parent: ElementTree.Element, name: str | None, signature: str, direction: str | None) -> None:
    attributes: dict[str, str] = {}
    if name is not None:
        attributes["name"] = name
    if direction is not None:
        attributes["direction"] = direction
    attributes["type"] = signature
    ElementTree.SubElement(parent, "arg", attributes)


def interface_to_element(interface: Interface) -> ElementTree.Element:
    """Describe one interface as an ``<interface>`` element.

    :param interface: Interface descriptor.
    :returns: Element with one child per method and signal, sorted by name.
    """
    element: ElementTree.Element = ElementTree.Element("interface", {"name": interface.name})
    for method_name in sorted(interface.methods):
        method = interface.methods[method_name]
        method_element: ElementTree.Element = ElementTree.SubElement(element, "method", {"name": method_name})
        for argument in method.params:
            _add_arg(method_element, argument.name, argument.signature, "in")
        for argument in method.rets:
            _add_arg(method_element, argument.name, argument.signature, "out")
    for signal_name in sorted(interface.signals):
        signal = interface.signals[signal_name]
        signal_element: ElementTree.Element = ElementTree.SubElement(element, "signal", {"name": signal_name})
        for argument in signal.params:
            _add_arg(signal_element, argument.name, argument.signature, None)
    return element


def object_to_xml(path: str, interfaces: Iterable[Interface], children: Iterable[str]) -> str:
    """Render the introspection document of one object path.

    :param path: Object path.
    :param interfaces: Interfaces implemented at ``path``.
    :param children: Names of direct child nodes.
    :returns: XML document including the DTD header.
    """
    node: ElementTree.Element = ElementTree.Element("node", {"name": path})
    introspectable: Interface = Interface(INTROSPECTABLE_INTERFACE)
    introspectable.define_method(INTROSPECT_MEMBER, "out xml_data:s")
    node.append(interface_to_element(introspectable))
    for interface in sorted(interfaces, key=lambda interface: interface.name):
        if interface.name == INTROSPECTABLE_INTERFACE:
            continue
        node.append(interface_to_element(interface))
    for child_name in sorted(children):
        ElementTree.SubElement(node, "node", {"name": child_name})
    ElementTree.indent(node)
    return DOCTYPE + ElementTree.tostring(node, encoding="unicode") + "\n"
