from dataclasses import dataclass
from typing import Any, Union

import pytest

from objmapper import NotAddressableError, TypeMismatchError


@dataclass
class InnerAny:
    data: Any = None


@dataclass
class WithAny:
    data: Any = None


@dataclass
class OuterAny:
    inner: Any = None


@dataclass
class IntBox:
    value: int = 0


@dataclass
class Either:
    value: Union[int, str] = 0


@dataclass
class Loose:
    value: object = None


@pytest.mark.parametrize("data", ["test string", 42, 2.5, b"raw", [1, 2], {"k": "v"}])
def test_any_field_takes_source_value(mapper, data):
    dst = WithAny()

    mapper.map(WithAny(data), dst)

    assert dst.data == data


def test_any_field_copies_records(mapper):
    src = WithAny(IntBox(7))
    dst = WithAny()

    mapper.map(src, dst)

    assert dst.data == IntBox(7)
    assert dst.data is not src.data


def test_any_field_nested(mapper):
    src = OuterAny(InnerAny("nested"))
    dst = OuterAny()

    mapper.map(src, dst)

    assert dst.inner == InnerAny("nested")
    assert dst.inner is not src.inner


def test_any_field_none_source(mapper):
    dst = WithAny("keep")

    mapper.map(WithAny(None), dst)

    assert dst.data == "keep"


def test_any_field_holding_immutable_value(mapper):
    with pytest.raises(NotAddressableError) as exc_info:
        mapper.map(WithAny("new"), WithAny(5))

    assert exc_info.value.path == "data"


def test_any_field_holding_record_is_updated_in_place(mapper):
    held = IntBox(0)
    dst = WithAny(held)

    mapper.map(WithAny(IntBox(7)), dst)

    assert dst.data is held
    assert held.value == 7


def test_any_field_holding_list(mapper):
    dst = WithAny([9])

    mapper.map(WithAny((1, 2)), dst)

    assert dst.data == [1, 2]


def test_any_field_with_function_source(mapper):
    dst = WithAny()

    mapper.map(WithAny(len), dst)

    assert dst.data is None


def test_object_annotation_behaves_like_any(mapper):
    dst = Loose()

    mapper.map(Loose("x"), dst)

    assert dst.value == "x"


@pytest.mark.parametrize("value", [3, "x"])
def test_union_member_selected_by_type(mapper, value):
    dst = Either()

    mapper.map(Either(value), dst)

    assert dst.value == value


def test_union_without_matching_member(mapper):
    with pytest.raises(TypeMismatchError):
        mapper.map(Loose(2.5), Either())
