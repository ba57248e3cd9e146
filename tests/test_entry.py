import dataclasses

import pytest

from stagechain import Entry


class Widget:
    def __init__(self, *args, **kwargs) -> None:
        self.args = args
        self.kwargs = kwargs


def test_make_new_builds_fresh_instance_with_stored_arguments() -> None:
    entry = Entry.of(Widget, 1, "two", three=3)

    first = entry.make_new()
    second = entry.make_new()

    assert first is not second
    assert first.args == (1, "two")
    assert first.kwargs == {"three": 3}


def test_entry_is_immutable() -> None:
    entry = Entry.of(Widget, 1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.args = (2,)  # type: ignore[misc]
    with pytest.raises(TypeError):
        entry.kwargs["extra"] = 1  # type: ignore[index]


def test_arguments_are_copied_at_creation() -> None:
    kwargs = {"a": 1}
    entry = Entry(Widget, [1, 2], kwargs)
    kwargs["a"] = 2

    assert entry.args == (1, 2)
    assert entry.kwargs["a"] == 1


def test_matches_by_identifier_equality() -> None:
    entry = Entry.of(Widget)

    assert entry.matches(Widget)
    assert not entry.matches(object)


def test_name_and_repr() -> None:
    entry = Entry.of(Widget, 1, flag=True)

    assert entry.name == "Widget"
    assert repr(entry) == "Entry(Widget(1, flag=True))"


def test_entries_are_hashable_by_identity() -> None:
    first = Entry.of(Widget, 1, flag=True)
    second = Entry.of(Widget, 1, flag=True)

    assert len({first, second}) == 2
    assert first == first
    assert first != second
    assert first.matches(second.identifier)
