"""Tests for method and signal prototype parsing."""

import pytest

from busexport import InvalidPrototypeError
from busexport import Method
from busexport import Signal
from busexport.prototype import Argument
from busexport.prototype import parse_method_prototype
from busexport.prototype import parse_signal_prototype


def test_method_prototype_splits_directions_in_order() -> None:
    """Inputs and outputs keep declaration order independently."""
    params, rets = parse_method_prototype("in a:i, out sum:i, in b:s, out flag:b")
    assert params == [Argument("a", "i"), Argument("b", "s")]
    assert rets == [Argument("sum", "i"), Argument("flag", "b")]


def test_method_prototype_allows_unnamed_arguments() -> None:
    """A bare signature yields an unnamed argument."""
    params, rets = parse_method_prototype("in a{sv}, out as")
    assert params == [Argument(None, "a{sv}")]
    assert rets == [Argument(None, "as")]


def test_empty_prototype_has_no_arguments() -> None:
    """An empty prototype declares nothing."""
    params, rets = parse_method_prototype("")
    assert params == []
    assert rets == []


@pytest.mark.parametrize("prototype", ["a:i", "inout a:i", "in a:i b:i", "in a:"])
def test_malformed_method_prototype_is_rejected(prototype: str) -> None:
    """Missing or unknown directions and empty signatures raise.

    :param prototype: Malformed prototype.
    """
    with pytest.raises(InvalidPrototypeError):
        parse_method_prototype(prototype)


def test_signal_prototype_has_no_direction() -> None:
    """Signal arguments are plain ``name:sig`` pairs."""
    params: list[Argument] = parse_signal_prototype("total:i, reason:s")
    assert params == [Argument("total", "i"), Argument("reason", "s")]
    with pytest.raises(InvalidPrototypeError):
        parse_signal_prototype("in total:i")


def test_descriptors_expose_concatenated_signatures() -> None:
    """Descriptors report their wire signatures."""
    method: Method = Method.from_prototype("DivMod", "in a:i, in b:i, out q:i, out r:i")
    signal: Signal = Signal.from_prototype("Changed", "value:i, label:s")
    assert method.in_signature == "ii"
    assert method.out_signature == "ii"
    assert signal.signature == "is"
