import enum
import queue
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Annotated, Any, Callable, Literal, NewType, Optional, Union

import pytest

from objmapper import TypeMismatchError
from objmapper.mapping.shapes import Kind, matches_exactly, scalar_kind, shape_of

UserId = NewType("UserId", int)


class Color(enum.IntEnum):
    RED = 1


@dataclass
class Record:
    value: int = 0


def _noop():
    return None


def _other():
    return None


@dataclass
class Handlers:
    callback: Callable[[], None] = _noop
    channel: queue.Queue = field(default_factory=queue.Queue)
    view: memoryview = field(default_factory=lambda: memoryview(b""))


@dataclass
class Mode:
    mode: str = "a"


@dataclass
class LiteralMode:
    mode: Literal["a", "b"] = "a"


@dataclass
class Day:
    when: object = None


@dataclass
class Moment:
    when: datetime = datetime.min


@pytest.mark.parametrize(
    "declared,kind",
    [
        (bool, Kind.BOOL),
        (int, Kind.INT),
        (float, Kind.FLOAT),
        (complex, Kind.COMPLEX),
        (str, Kind.STR),
        (bytes, Kind.BYTES),
        (tuple[int, str], Kind.ARRAY),
        (tuple[int, ...], Kind.SEQUENCE),
        (list[int], Kind.SEQUENCE),
        (set[int], Kind.SET),
        (dict[str, int], Kind.MAPPING),
        (Optional[int], Kind.OPTIONAL),
        (int | None, Kind.OPTIONAL),
        (Union[int, str], Kind.INTERFACE),
        (Any, Kind.INTERFACE),
        (object, Kind.INTERFACE),
        (Record, Kind.RECORD),
        (datetime, Kind.OPAQUE),
        (Color, Kind.OPAQUE),
        (Literal["a"], Kind.OPAQUE),
        (Callable[[], int], Kind.UNSUPPORTED),
        (queue.Queue, Kind.UNSUPPORTED),
        (memoryview, Kind.UNSUPPORTED),
        (Annotated[int, "meta"], Kind.INT),
        (UserId, Kind.INT),
    ],
)
def test_shape_of(declared, kind):
    assert shape_of(declared).kind is kind


def test_shape_arguments():
    assert shape_of(tuple[int, str]).args == (int, str)
    assert shape_of(tuple[()]).args == ()
    assert shape_of(dict[str, int]).args == (str, int)
    assert shape_of(dict).args == (Any, Any)
    assert shape_of(Optional[Union[int, str]]).args == (Union[int, str],)
    assert shape_of(Union[int, str]).args == (int, str)


def test_scalar_kind():
    assert scalar_kind(True) is Kind.BOOL
    assert scalar_kind(1) is Kind.INT
    assert scalar_kind(Color.RED) is Kind.INT
    assert scalar_kind(b"x") is Kind.BYTES
    assert scalar_kind([1]) is None


@pytest.mark.parametrize(
    "value,declared,expected",
    [
        (1, int, True),
        (True, int, False),
        (None, Optional[int], True),
        (1, Optional[int], True),
        ("x", Optional[int], False),
        ("x", Any, True),
        ([1], list[int], True),
        ((1,), list[int], False),
    ],
)
def test_matches_exactly(value, declared, expected):
    assert matches_exactly(value, declared) is expected


def test_unsupported_destinations_are_left_alone(mapper):
    channel = queue.Queue()
    dst = Handlers()
    before = (dst.callback, dst.channel, dst.view)

    mapper.map(Handlers(callback=_other, channel=channel, view=memoryview(b"abc")), dst)

    assert (dst.callback, dst.channel, dst.view) == before


def test_literal_destination_is_a_mismatch(mapper):
    with pytest.raises(TypeMismatchError):
        mapper.map(Mode("a"), LiteralMode())


def test_opaque_destination_requires_an_instance(mapper):
    with pytest.raises(TypeMismatchError) as exc_info:
        mapper.map(Day(date(2024, 1, 1)), Moment())

    assert exc_info.value.details["destination_kind"] == "opaque"
