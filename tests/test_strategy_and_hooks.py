from types import SimpleNamespace

import pytest

from folio.changeset import AttributeChangeset
from folio.content_models import Page, Post
from folio.hooks import HookRegistry
from folio.model import ContentModel, default_content_strategy
from folio.strategy import ContentStrategy


class Note(ContentModel):
    pass


class Memo(ContentModel):
    pass


def fake_document(label=None):
    collection = SimpleNamespace(label=label) if label is not None else None
    return SimpleNamespace(collection=collection)


def test_changeset_tracks_distinct_names():
    changeset = AttributeChangeset()
    assert changeset.changes() == frozenset()
    for name in ["title", "date", "title"]:
        changeset.will_change(name)
    assert changeset.changes() == {"title", "date"}
    assert "title" in changeset
    assert len(changeset) == 2

    snapshot = changeset.changes()
    changeset.clear()
    assert changeset.changes() == frozenset()
    assert snapshot == {"title", "date"}


def test_strategy_resolves_registered_labels():
    strategy = ContentStrategy(default=ContentModel)
    strategy.register(Note, for_label="notes")
    assert strategy.resolve_for_label("notes") is Note
    assert strategy.resolve_for_label("Notes") is ContentModel
    assert strategy.resolve_for_label("unknown") is ContentModel
    assert strategy.labels() == ["notes"]


def test_strategy_last_registration_wins():
    strategy = ContentStrategy(default=ContentModel)
    strategy.register(Note, for_label="notes")
    strategy.register(Memo, for_label="notes")
    assert strategy.resolve_for_label("notes") is Memo


def test_strategy_resolves_documents():
    strategy = ContentStrategy(default=ContentModel)
    assert strategy.resolve_for_document(fake_document()) is ContentModel
    strategy.register(Memo, for_label="pages")
    strategy.register(Note, for_label="notes")
    assert strategy.resolve_for_document(fake_document()) is Memo
    assert strategy.resolve_for_document(fake_document("notes")) is Note
    assert strategy.resolve_for_document(fake_document("authors")) is ContentModel


def test_default_strategy_registrations():
    assert default_content_strategy.resolve_for_label("pages") is Page
    assert default_content_strategy.resolve_for_label("posts") is Post
    assert default_content_strategy.resolve_for_label("authors") is ContentModel
    assert ContentModel.content_strategy is default_content_strategy


def test_hooks_run_in_order_around_action():
    registry = HookRegistry()
    calls = []
    registry.register(ContentModel, "before_save", lambda model: calls.append("before"))
    registry.register(ContentModel, "after_save", lambda model: calls.append("after"))

    def action():
        calls.append("action")
        return True

    assert registry.run(Note(), "save", action) is True
    assert calls == ["before", "action", "after"]


def test_before_hook_returning_false_vetoes():
    registry = HookRegistry()
    calls = []
    registry.register(ContentModel, "before_destroy", lambda model: False)
    registry.register(ContentModel, "after_destroy", lambda model: calls.append("after"))
    assert registry.run(Note(), "destroy", lambda: calls.append("action")) is False
    assert calls == []


def test_hooks_apply_to_subclasses_only():
    registry = HookRegistry()
    seen = []
    registry.register(Note, "before_save", lambda model: seen.append(type(model)))
    registry.run(Note(), "save", lambda: True)
    registry.run(Memo(), "save", lambda: True)
    assert seen == [Note]
    assert registry.hooks_for(Memo(), "before_save") == []

    registry.clear()
    assert registry.hooks_for(Note(), "before_save") == []


def test_unknown_hook_name_is_rejected():
    with pytest.raises(ValueError):
        HookRegistry().register(ContentModel, "around_save", lambda model: None)
