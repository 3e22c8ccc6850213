"""Prototype string parsing for method and signal declarations.

A method prototype lists comma-separated arguments, each prefixed with its
direction: ``"in a:i, in b:i, out sum:i"``. Argument names are optional
(``"in i, out s"``). Signal prototypes carry no direction: ``"value:i, s"``.

Signature strings themselves are kept opaque; validating the type grammar
is left to the marshalling layer.
"""

from typing import Literal

from busexport.errors import InvalidPrototypeError

Direction = Literal["in", "out"]


class Argument:
    """One named, typed argument of a method or signal."""

    __slots__ = ("name", "signature")

    name: str | None
    signature: str

    def __init__(self, name: str | None, signature: str) -> None:
        """Initialize an argument.

        :param name: Optional argument name.
        :param signature: Type signature, such as ``"i"`` or ``"a{sv}"``.
        """
        self.name = name
        self.signature = signature

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Argument) is False:
            return NotImplemented
        return self.name == other.name and self.signature == other.signature

    def __repr__(self) -> str:
        return f"Argument({self.name!r}, {self.signature!r})"


def _split_prototype(prototype: str) -> list[str]:
    """Split a prototype into stripped, non-empty argument chunks.

    :param prototype: Raw prototype string.
    :returns: Argument chunks in declaration order.
    """
    chunks: list[str] = []
    for raw_chunk in prototype.split(","):
        chunk: str = raw_chunk.strip()
        if chunk == "":
            continue
        chunks.append(chunk)
    return chunks


def _parse_name_and_signature(text: str, prototype: str) -> Argument:
    """Parse ``name:sig`` or a bare ``sig``.

    :param text: Argument text without direction.
    :param prototype: Full prototype, used in error messages.
    :returns: Parsed argument.
    :raises InvalidPrototypeError: If the signature part is empty.
    """
    name: str | None = None
    signature: str = text
    has_name: bool = ":" in text
    if has_name is True:
        name_part, signature = text.split(":", 1)
        name = name_part.strip() or None
        signature = signature.strip()
    if signature == "":
        raise InvalidPrototypeError(f"Missing signature in prototype {prototype!r}")
    return Argument(name, signature)


def parse_method_prototype(prototype: str) -> tuple[list[Argument], list[Argument]]:
    """Parse a method prototype into parameter and return arguments.

    :param prototype: Prototype such as ``"in a:i, in b:i, out sum:i"``.
    :returns: Tuple of ``(params, rets)``.
    :raises InvalidPrototypeError: If an argument lacks a valid direction.
    """
    params: list[Argument] = []
    rets: list[Argument] = []
    for chunk in _split_prototype(prototype):
        pieces: list[str] = chunk.split()
        if len(pieces) != 2:
            raise InvalidPrototypeError(
                f"Expected '<in|out> [name:]signature', got {chunk!r} in {prototype!r}"
            )
        direction, rest = pieces
        argument: Argument = _parse_name_and_signature(rest, prototype)
        if direction == "in":
            params.append(argument)
        elif direction == "out":
            rets.append(argument)
        else:
            raise InvalidPrototypeError(f"Unknown direction {direction!r} in {prototype!r}")
    return params, rets


def parse_signal_prototype(prototype: str) -> list[Argument]:
    """Parse a signal prototype into its ordered arguments.

    :param prototype: Prototype such as ``"value:i, label:s"``.
    :returns: Signal arguments.
    :raises InvalidPrototypeError: If an argument is malformed.
    """
    params: list[Argument] = []
    for chunk in _split_prototype(prototype):
        pieces: list[str] = chunk.split()
        if len(pieces) != 1:
            raise InvalidPrototypeError(f"Signal arguments take no direction: {chunk!r} in {prototype!r}")
        params.append(_parse_name_and_signature(pieces[0], prototype))
    return params
