"""End-to-end copy scenarios through the public API."""

import datetime as dt
from dataclasses import dataclass, field

import pytest

from deepclone import InvalidArgumentError, Ref, TypeMismatchError, deep_clone, deep_copy

TEXT = "foobar"


class Name(str):
    pass


@dataclass
class S1:
    ints: list[int] = field(default_factory=list)


@dataclass
class Bar:
    a: str

    def __clone__(self) -> Ref["Bar"]:
        return Ref(Bar(TEXT))


@dataclass
class Foo:
    bar: Ref[Bar]


@dataclass
class S2:
    i: int = 0
    f: float = 0.0
    string: str = ""
    name: Name = Name("")
    strings: list[str] | None = None
    empty_slice: list[str] | None = None
    nil_slice: list[str] | None = None
    mapping: dict[str, list[int]] | None = None
    empty_map: dict[str, list[int]] | None = None
    nil_map: dict[str, list[int]] | None = None
    struct_slice: list[S1] = field(default_factory=list)
    struct_ref_slice: list[Ref[S1]] = field(default_factory=list)
    struct_map: dict[str, S1] = field(default_factory=dict)
    struct_ref_map: dict[str, Ref[S1]] = field(default_factory=dict)
    embedded: S1 = field(default_factory=S1)
    stamp: dt.datetime | None = None
    array: tuple[int, int, int] = (0, 0, 0)


@pytest.mark.parametrize(
    "value",
    [
        1,
        1.0,
        "foo",
        Name("foo"),
        ["foo", "bar"],
        [],
        None,
        {"foo": [1, 2, 3]},
        {},
        (1, 2, 3),
        Ref(Ref(1)),
    ],
    ids=["int", "float", "str", "str-subclass", "list", "empty-list", "none", "map",
         "empty-map", "array", "ref-ref"],
)
def test_basic_values_round_trip(value) -> None:
    copy = deep_clone(Ref(value))
    assert copy == value
    assert type(copy) is type(value)


def test_struct_with_every_shape_round_trips() -> None:
    source = S2(
        i=1,
        f=1.0,
        string="foo",
        name=Name("foo"),
        strings=["foo", "bar"],
        empty_slice=[],
        mapping={"foo": [1, 2, 3]},
        empty_map={},
        struct_slice=[S1([1, 2, 3])],
        struct_ref_slice=[Ref(S1([1, 2, 3]))],
        struct_map={"foo": S1([1, 2, 3])},
        struct_ref_map={"foo": Ref(S1([1, 2, 3]))},
        embedded=S1([1, 2, 3]),
        stamp=dt.datetime.now(dt.UTC),
        array=(1, 2, 3),
    )

    copy = deep_clone(source)

    assert copy == source
    assert copy.empty_slice == [] and copy.empty_slice is not source.empty_slice
    assert copy.nil_slice is None
    assert copy.empty_map == {} and copy.empty_map is not source.empty_map
    assert copy.nil_map is None
    assert copy.struct_ref_slice[0] is not source.struct_ref_slice[0]
    assert copy.struct_ref_map["foo"].value is not source.struct_ref_map["foo"].value
    assert copy.embedded.ints is not source.embedded.ints


def test_map_of_lists_is_independently_mutable() -> None:
    source = {"a": [1, 2]}

    copy = deep_clone(source)
    copy["a"].append(3)

    assert source["a"] == [1, 2]


def test_override_behind_reference_field() -> None:
    """A field holding a Ref to an overriding type yields the override's value."""
    copy = deep_clone(Foo(Ref(Bar("hello"))))
    assert copy.bar.value.a == TEXT

    assert deep_clone(Bar("hello")).a == TEXT


def test_presized_destination_takes_source_length() -> None:
    destination = [0] * 5
    deep_copy(destination, [1, 2, 3])
    assert destination == [1, 2, 3]


def test_contract_violations() -> None:
    with pytest.raises(TypeMismatchError):
        deep_copy([], {})
    with pytest.raises(InvalidArgumentError):
        deep_copy(None, 1)
