from __future__ import annotations

import logging

import pytest

from OptionGuard.core.config import GuardConfig
from OptionGuard.core.errors import MissingPriorCreate, SizeLimitExceeded
from OptionGuard.core.guard import OptionUsageGuard
from OptionGuard.core.store import OptionStore


class UppercaseHook:
    def __init__(self):
        self.calls = []

    def on_before_update(self, key, value, *, autoload=None):
        self.calls.append((key, value))
        return value.upper()


def guarded_store(**config):
    store = OptionStore()
    guard = OptionUsageGuard(store, GuardConfig(**config))
    store.register(guard)
    return store, guard


def test_add_then_get():
    store = OptionStore()
    assert store.add("k", {"a": 1}) is True
    assert store.get("k") == {"a": 1}
    assert store.exists("k")
    assert store.keys() == ["k"]


def test_add_existing_key_is_rejected_without_hooks():
    store = OptionStore()
    hook = UppercaseHook()
    store.register(hook)
    store.add("k", "v")
    assert store.add("k", "other") is False
    assert store.get("k") == "v"


def test_update_uses_hook_return_value():
    store = OptionStore()
    store.add("k", "old")
    hook = UppercaseHook()
    store.register(hook)

    assert store.update("k", "new") is True
    assert store.get("k") == "NEW"
    assert hook.calls == [("k", "new")]


def test_update_with_same_value_is_noop():
    store = OptionStore()
    store.add("k", "v")
    assert store.update("k", "v") is False


def test_register_rejects_objects_without_hooks():
    with pytest.raises(TypeError):
        OptionStore().register(object())


def test_unregister_stops_hook():
    store = OptionStore()
    store.add("k", "a")
    hook = UppercaseHook()
    store.register(hook)
    store.unregister(hook)
    store.update("k", "b")
    assert store.get("k") == "b"


def test_delete():
    store = OptionStore()
    store.add("k", "v")
    assert store.delete("k") is True
    assert store.delete("k") is False
    assert store.get("k", "default") == "default"


def test_autoload_size_skips_non_autoloaded_and_excluded():
    store = OptionStore()
    store.add("a", "xxx")
    store.add("b", "xx")
    store.add("c", "xxxxxxxx", autoload=False)
    assert store.autoload_size() == 5
    assert store.autoload_size(exclude="a") == 2
    assert store.is_autoloaded("a")
    assert not store.is_autoloaded("c")


def test_strict_guard_rejects_oversized_add():
    store, _ = guarded_store(max_value_size=10, strict_mode=True)
    with pytest.raises(SizeLimitExceeded):
        store.add("k", "x" * 11)
    assert not store.exists("k")


def test_strict_guard_rejects_update_without_add():
    store, _ = guarded_store(strict_mode=True)
    with pytest.raises(MissingPriorCreate):
        store.update("absent", "x")
    assert not store.exists("absent")


def test_non_strict_guard_is_advisory(caplog):
    store, _ = guarded_store(max_value_size=10, strict_mode=False)
    with caplog.at_level(logging.WARNING, logger="optionguard"):
        assert store.update("absent", "x") is True
    assert store.get("absent") == "x"
    assert any("does not exist" in record.getMessage() for record in caplog.records)


def test_strict_guard_allows_normal_lifecycle():
    store, _ = guarded_store(max_value_size=100, strict_mode=True)
    assert store.add("k", "v1")
    assert store.update("k", "v2")
    assert store.get("k") == "v2"


def test_non_strict_update_without_add_runs_both_hooks(caplog):
    # The fall-through to add fires the create hook too, so size is reported twice.
    store, _ = guarded_store(max_value_size=3, strict_mode=False)
    with caplog.at_level(logging.WARNING, logger="optionguard"):
        assert store.update("absent", "toolong") is True
    messages = [record.getMessage() for record in caplog.records]
    assert sum("too big" in message for message in messages) == 2
    assert sum("does not exist" in message for message in messages) == 1
    assert store.get("absent") == "toolong"
