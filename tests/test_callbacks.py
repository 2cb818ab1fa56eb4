"""Unit tests for contentdb.engine.callbacks — lifecycle hooks."""

import pytest

from contentdb.engine.callbacks import (
    CallbackEvent,
    CallbackRegistry,
    HaltCallbacks,
    get_callback_registry,
    on_event,
    run_callbacks,
)


class Base:
    pass


class Child(Base):
    pass


class TestCallbackRegistry:
    def setup_method(self):
        self.registry = CallbackRegistry()
        self.calls = []

    def _hook(self, label):
        def handler(record):
            self.calls.append(label)
        handler.__name__ = label
        return handler

    def test_register_unknown_event(self):
        with pytest.raises(ValueError, match="Unknown callback event"):
            self.registry.register(Base, "before_publish", self._hook("x"))

    def test_priority_order(self):
        self.registry.register(Base, CallbackEvent.BEFORE_SAVE, self._hook("late"), priority=10)
        self.registry.register(Base, CallbackEvent.BEFORE_SAVE, self._hook("early"), priority=-1)
        self.registry.run("save", Base(), lambda: True)
        assert self.calls == ["early", "late"]

    def test_inherited_hooks_run_base_first(self):
        self.registry.register(Child, CallbackEvent.BEFORE_SAVE, self._hook("child"))
        self.registry.register(Base, CallbackEvent.BEFORE_SAVE, self._hook("base"))
        self.registry.run("save", Child(), lambda: True)
        assert self.calls == ["base", "child"]

    def test_subclass_hooks_do_not_run_for_base(self):
        self.registry.register(Child, CallbackEvent.BEFORE_SAVE, self._hook("child"))
        self.registry.run("save", Base(), lambda: True)
        assert self.calls == []

    def test_nested_kinds_order(self):
        for event in ("before_save", "before_create", "after_create", "after_save"):
            self.registry.register(Base, event, self._hook(event))

        def action():
            self.calls.append("action")
            return True

        assert self.registry.run(("save", "create"), Base(), action) is True
        assert self.calls == ["before_save", "before_create", "action", "after_create", "after_save"]

    def test_halt_in_before_hook(self):
        def halt(record):
            raise HaltCallbacks()

        self.registry.register(Base, CallbackEvent.BEFORE_DESTROY, halt)
        self.registry.register(Base, CallbackEvent.AFTER_DESTROY, self._hook("after"))
        result = self.registry.run("destroy", Base(), lambda: self.calls.append("action"))
        assert result is False
        assert self.calls == []

    def test_halt_in_after_hook_keeps_result(self):
        def halt(record):
            raise HaltCallbacks()

        self.registry.register(Base, CallbackEvent.AFTER_SAVE, halt)
        self.registry.register(Base, CallbackEvent.AFTER_SAVE, self._hook("skipped"))
        assert self.registry.run("save", Base(), lambda: "done") == "done"
        assert self.calls == []

    def test_other_exceptions_propagate(self):
        def boom(record):
            raise RuntimeError("veto")

        self.registry.register(Base, CallbackEvent.BEFORE_SAVE, boom)
        with pytest.raises(RuntimeError, match="veto"):
            self.registry.run("save", Base(), lambda: True)

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown callback kind"):
            self.registry.run("publish", Base(), lambda: True)

    def test_register_many_skips_unknown(self):
        count = self.registry.register_many(Base, {
            "before_save": [self._hook("a"), self._hook("b")],
            "before_publish": [self._hook("c")],
        })
        assert count == 2
        assert self.registry.hook_count == 2

    def test_unregister(self):
        hook = self._hook("a")
        self.registry.register(Base, CallbackEvent.AFTER_SAVE, hook)
        assert self.registry.unregister(Base, CallbackEvent.AFTER_SAVE, hook) is True
        assert self.registry.unregister(Base, CallbackEvent.AFTER_SAVE, hook) is False
        assert self.registry.hook_count == 0

    def test_clear(self):
        self.registry.register(Base, CallbackEvent.AFTER_SAVE, self._hook("a"))
        self.registry.clear()
        assert self.registry.hook_count == 0


class TestGlobalRegistry:
    def test_singleton(self):
        assert get_callback_registry() is get_callback_registry()

    def test_on_event_decorator(self):
        seen = []

        @on_event(Base, "after_update")
        def remember(record):
            seen.append(record)

        record = Base()
        assert run_callbacks("update", record, lambda: True) is True
        assert seen == [record]
        assert remember.__name__ == "remember"
