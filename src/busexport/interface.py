"""Interface, method and signal descriptors."""

from collections.abc import Callable

from busexport.prototype import Argument
from busexport.prototype import parse_method_prototype
from busexport.prototype import parse_signal_prototype

Handler = Callable[..., object]


class Method:
    """A callable member with ordered input and output arguments."""

    name: str
    params: list[Argument]
    rets: list[Argument]

    def __init__(self, name: str) -> None:
        """Initialize a method without arguments.

        :param name: Member name.
        """
        self.name = name
        self.params = []
        self.rets = []

    @classmethod
    def from_prototype(cls, name: str, prototype: str = "") -> "Method":
        """Build a method from a prototype string.

        :param name: Member name.
        :param prototype: Prototype such as ``"in a:i, out sum:i"``.
        :returns: Parsed method descriptor.
        """
        method: Method = cls(name)
        method.params, method.rets = parse_method_prototype(prototype)
        return method

    @property
    def in_signature(self) -> str:
        """Return the concatenated input signature.

        :returns: Input signature.
        """
        return "".join(argument.signature for argument in self.params)

    @property
    def out_signature(self) -> str:
        """Return the concatenated output signature.

        :returns: Output signature.
        """
        return "".join(argument.signature for argument in self.rets)

    def __repr__(self) -> str:
        return f"Method({self.name!r}, in={self.in_signature!r}, out={self.out_signature!r})"


class Signal:
    """A one-way notification with ordered arguments."""

    name: str
    params: list[Argument]

    def __init__(self, name: str) -> None:
        """Initialize a signal without arguments.

        :param name: Member name.
        """
        self.name = name
        self.params = []

    @classmethod
    def from_prototype(cls, name: str, prototype: str = "") -> "Signal":
        """Build a signal from a prototype string.

        :param name: Member name.
        :param prototype: Prototype such as ``"value:i, label:s"``.
        :returns: Parsed signal descriptor.
        """
        signal: Signal = cls(name)
        signal.params = parse_signal_prototype(prototype)
        return signal

    @property
    def signature(self) -> str:
        """Return the concatenated argument signature.

        :returns: Argument signature.
        """
        return "".join(argument.signature for argument in self.params)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, {self.signature!r})"


class Interface:
    """A named group of methods and signals."""

    name: str
    methods: dict[str, Method]
    signals: dict[str, Signal]

    def __init__(self, name: str) -> None:
        """Initialize an empty interface.

        :param name: Reverse-DNS interface name.
        """
        self.name = name
        self.methods = {}
        self.signals = {}

    def define(self, member: Method | Signal) -> None:
        """Add or replace one member.

        :param member: Method or signal descriptor.
        :raises TypeError: If ``member`` is neither a method nor a signal.
        """
        if isinstance(member, Method) is True:
            self.methods[member.name] = member
            return
        if isinstance(member, Signal) is True:
            self.signals[member.name] = member
            return
        raise TypeError(f"Cannot define {type(member).__name__} on an interface")

    def define_method(self, name: str, prototype: str = "") -> Method:
        """Parse and add one method.

        :param name: Method name.
        :param prototype: Method prototype.
        :returns: Stored method descriptor.
        """
        method: Method = Method.from_prototype(name, prototype)
        self.define(method)
        return method

    def define_signal(self, name: str, prototype: str = "") -> Signal:
        """Parse and add one signal.

        :param name: Signal name.
        :param prototype: Signal prototype.
        :returns: Stored signal descriptor.
        """
        signal: Signal = Signal.from_prototype(name, prototype)
        self.define(signal)
        return signal

    def __repr__(self) -> str:
        return f"Interface({self.name!r}, methods={sorted(self.methods)!r}, signals={sorted(self.signals)!r})"
