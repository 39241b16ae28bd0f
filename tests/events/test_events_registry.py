"""
Tests for emitkit.events.registry - Listener storage and selection.
"""

import pytest

from emitkit.events.errors import (
    DuplicateListenerError,
    InvalidEventKeyError,
    InvalidListenerError,
)
from emitkit.events.registry import ListenerRecord, ListenerRegistry


def handler_a(*args):
    pass


def handler_b(*args):
    pass


class Target:
    def handle(self, *args):
        pass


@pytest.fixture
def registry():
    return ListenerRegistry()


# ── ListenerRecord Tests ─────────────────────────────────────

class TestListenerRecord:
    def test_new_record_is_active(self):
        record = ListenerRecord(key="event", callback=handler_a)
        assert record.active
        assert not record.once
        assert record.context is None

    def test_deactivate_is_one_way(self):
        record = ListenerRecord(key="event", callback=handler_a)
        assert record.deactivate() is True
        assert record.deactivate() is False
        assert not record.active

    def test_records_compare_by_identity(self):
        first = ListenerRecord(key="event", callback=handler_a)
        second = ListenerRecord(key="event", callback=handler_a)
        assert first != second


# ── Registration Tests ───────────────────────────────────────

class TestRegister:
    def test_register_appends_in_order(self, registry):
        registry.register("event", handler_a)
        registry.register("event", handler_b)
        assert [r.callback for r in registry.records_for("event")] == [
            handler_a,
            handler_b,
        ]

    def test_duplicate_rejected(self, registry):
        registry.register("event", handler_a)
        with pytest.raises(DuplicateListenerError) as exc_info:
            registry.register("event", handler_a)
        assert exc_info.value.listener_name == "handler_a"
        assert registry.listener_count("event") == 1

    def test_duplicate_with_same_context_rejected(self, registry):
        context = object()
        registry.register("event", handler_a, context)
        with pytest.raises(DuplicateListenerError):
            registry.register("event", handler_a, context, once=True)

    def test_no_context_and_context_are_distinct(self, registry):
        registry.register("event", handler_a)
        registry.register("event", handler_a, object())
        assert registry.listener_count("event") == 2

    def test_same_listener_on_other_key_allowed(self, registry):
        registry.register("event", handler_a)
        registry.register("other", handler_a)
        assert registry.event_keys() == frozenset({"event", "other"})

    def test_bound_methods_of_same_object_are_duplicates(self, registry):
        target = Target()
        registry.register("event", target.handle)
        with pytest.raises(DuplicateListenerError):
            registry.register("event", target.handle)

    def test_bound_methods_of_other_objects_are_distinct(self, registry):
        registry.register("event", Target().handle)
        registry.register("event", Target().handle)
        assert registry.listener_count("event") == 2

    def test_reregister_after_detach_allowed(self, registry):
        record = registry.register("event", handler_a)
        registry.detach(record)
        registry.register("event", handler_a)
        assert registry.listener_count("event") == 1

    def test_type_key_accepted(self, registry):
        registry.register(Target, handler_a)
        assert registry.has_listeners(Target)

    @pytest.mark.parametrize("key", [42, None, ("a", "b"), Target()])
    def test_invalid_key_rejected(self, registry, key):
        with pytest.raises(InvalidEventKeyError):
            registry.register(key, handler_a)

    def test_non_callable_rejected(self, registry):
        with pytest.raises(InvalidListenerError):
            registry.register("event", 123)


# ── Detach Tests ─────────────────────────────────────────────

class TestDetach:
    def test_detach_removes_and_deactivates(self, registry):
        record = registry.register("event", handler_a)
        assert registry.detach(record) is True
        assert not record.active
        assert registry.records_for("event") == []
        assert "event" not in registry.event_keys()

    def test_detach_twice_is_noop(self, registry):
        record = registry.register("event", handler_a)
        registry.detach(record)
        assert registry.detach(record) is False

    def test_detach_preserves_order_of_others(self, registry):
        first = registry.register("event", handler_a)
        registry.register("event", handler_b)
        third = registry.register("event", Target().handle)
        registry.detach(first)
        assert registry.records_for("event")[-1] is third
        assert registry.records_for("event")[0].callback is handler_b


# ── Selection Tests ──────────────────────────────────────────

class TestSelect:
    @pytest.fixture
    def context(self):
        return object()

    @pytest.fixture
    def populated(self, registry, context):
        plain = registry.register("event", handler_a)
        bound = registry.register("event", handler_a, context)
        other = registry.register("other", handler_b, context)
        return plain, bound, other

    def test_select_all(self, registry, populated):
        assert registry.select() == list(populated)

    def test_select_key(self, registry, populated):
        plain, bound, _ = populated
        assert registry.select("event") == [plain, bound]

    def test_select_key_and_callback_ignores_context_records(self, registry, populated):
        plain, _, _ = populated
        assert registry.select("event", handler_a) == [plain]

    def test_select_exact_triple(self, registry, populated, context):
        _, bound, _ = populated
        assert registry.select("event", handler_a, context) == [bound]

    def test_select_other_context_matches_nothing(self, registry, populated):
        assert registry.select("event", handler_a, object()) == []

    def test_select_key_and_context(self, registry, populated, context):
        _, bound, _ = populated
        assert registry.select("event", context=context) == [bound]

    def test_select_unknown_key(self, registry, populated):
        assert registry.select("missing") == []

    def test_select_by_context(self, registry, populated, context):
        _, bound, other = populated
        assert registry.select_by_context(context) == [bound, other]

    def test_selection_is_a_copy(self, registry, populated):
        selected = registry.select("event")
        for record in selected:
            registry.detach(record)
        assert len(selected) == 2
        assert registry.select("event") == []


# ── Matching Tests ───────────────────────────────────────────

class TestMatching:
    def test_records_for_types_in_given_order(self, registry):
        class Base:
            pass

        class Child(Base):
            pass

        base = registry.register(Base, handler_a)
        child = registry.register(Child, handler_b)
        assert registry.records_for_types((Child, Base, object)) == [child, base]

    def test_records_for_unknown_key_is_empty(self, registry):
        assert registry.records_for("nobody") == []


# ── Introspection Tests ──────────────────────────────────────

class TestIntrospection:
    def test_empty_registry(self, registry):
        assert registry.listener_count() == 0
        assert not registry.has_listeners("event")
        assert registry.event_keys() == frozenset()

    def test_counts(self, registry):
        registry.register("event", handler_a)
        registry.register("event", handler_b)
        registry.register("other", handler_a)
        assert registry.listener_count("event") == 2
        assert registry.listener_count() == 3
