"""Explicit outcome of one handler invocation.

Handlers may return one of these directly. Plain return values and raised
exceptions are converted by :func:`to_call_result`.
"""

import traceback

from busexport.errors import BusError


class CallResult:
    """Base class for handler outcomes."""


class Success(CallResult):
    """Handler completed and produced ordered return values."""

    values: list[object]

    def __init__(self, values: list[object]) -> None:
        """Initialize a success outcome.

        :param values: Ordered return values.
        """
        self.values = values

    def __repr__(self) -> str:
        return f"Success({self.values!r})"


class ApplicationFault(CallResult):
    """Handler reported a named bus error."""

    name: str
    description: str

    def __init__(self, name: str, description: str) -> None:
        """Initialize an application fault.

        :param name: Reverse-DNS error name.
        :param description: Human-readable description.
        """
        self.name = name
        self.description = description

    def __repr__(self) -> str:
        return f"ApplicationFault({self.name!r}, {self.description!r})"


class InternalFault(CallResult):
    """Handler failed with an unclassified exception."""

    kind: str
    message: str
    trace: str

    def __init__(self, kind: str, message: str, trace: str) -> None:
        """Initialize an internal fault.

        :param kind: Exception type name.
        :param message: Exception message.
        :param trace: Formatted traceback.
        """
        self.kind = kind
        self.message = message
        self.trace = trace

    def describe(self) -> str:
        """Render the fault as an error description.

        :returns: Kind, message and traceback in one string.
        """
        return f"{self.kind}: {self.message}\n==== Backtrace ====\n{self.trace}"

    def __repr__(self) -> str:
        return f"InternalFault({self.kind!r}, {self.message!r})"


def normalize_values(result: object) -> list[object]:
    """Turn a handler return value into an ordered value list.

    :param result: Raw handler return value.
    :returns: ``[]`` for ``None``, a copy of a list or tuple, else ``[result]``.
    """
    if result is None:
        return []
    if isinstance(result, (list, tuple)) is True:
        return list(result)
    return [result]


def to_call_result(result: object) -> CallResult:
    """Convert a plain handler return value into a call result.

    :param result: Raw handler return value.
    :returns: ``result`` itself when already a call result, else a success.
    """
    if isinstance(result, CallResult) is True:
        return result
    return Success(normalize_values(result))


def from_exception(exc: BaseException) -> CallResult:
    """Convert an exception raised by a handler into a call result.

    Must be called from inside the ``except`` block so the traceback is
    still available.

    :param exc: Raised exception.
    :returns: Application fault for :class:`BusError`, otherwise internal fault.
    """
    if isinstance(exc, BusError) is True:
        return ApplicationFault(exc.error_name, exc.description)
    return InternalFault(type(exc).__name__, str(exc), traceback.format_exc())
