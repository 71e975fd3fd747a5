"""
Tests for the Listener Registry and Listener base

These tests validate:
- Registration order is dispatch order
- Names are unique
- Default chain respects configuration
- Listener routing by node kind
"""

import pytest

from introstub.config import LISTENER_NAMES, Config
from introstub.core.events import NodeAdded, NodeKind, UnsupportedEventError
from introstub.core.tree import ClassNode, ConstNode
from introstub.listeners import Listener, ListenerRegistry, default_registry


class Recorder(Listener):
    """Records every callback it receives into a shared log."""

    def __init__(self, pipeline, name, log):
        super().__init__(pipeline)
        self.name = name
        self.log = log

    def on_scope(self, event):
        self.log.append((self.name, "scope"))

    def on_const(self, event):
        self.log.append((self.name, "const"))

    def on_method(self, event):
        self.log.append((self.name, "method"))


def scope_event(kind=NodeKind.SCOPE):
    return NodeAdded("pkg.Foo", object, ClassNode("pkg.Foo"), kind)


class TestListenerRegistry:
    """Ordered, uniquely named listeners."""

    def test_dispatch_in_registration_order(self):
        log = []
        registry = ListenerRegistry()
        registry.register(Recorder(None, "second", log))
        registry.register(Recorder(None, "first", log))

        registry.dispatch(scope_event())

        assert log == [("second", "scope"), ("first", "scope")]

    def test_duplicate_name_rejected(self):
        registry = ListenerRegistry()
        registry.register(Recorder(None, "a", []))
        with pytest.raises(ValueError, match="already registered"):
            registry.register(Recorder(None, "a", []))

    def test_unregister(self):
        registry = ListenerRegistry()
        registry.register(Recorder(None, "a", []))

        assert registry.unregister("a")
        assert not registry.unregister("a")
        assert len(registry) == 0
        assert "a" not in registry

    def test_names_and_iteration(self):
        registry = ListenerRegistry()
        registry.register(Recorder(None, "a", []))
        registry.register(Recorder(None, "b", []))

        assert registry.names() == ["a", "b"]
        assert [listener.name for listener in registry] == ["a", "b"]
        assert registry.get("b").name == "b"

    def test_exceptions_propagate(self):
        class Failing(Listener):
            name = "failing"

            def on_scope(self, event):
                raise KeyError("broken")

        registry = ListenerRegistry()
        registry.register(Failing(None))
        with pytest.raises(KeyError):
            registry.dispatch(scope_event())


class TestListenerBase:
    """Routing and foreign-scope filtering."""

    def test_routes_by_kind(self):
        log = []
        listener = Recorder(None, "r", log)

        listener.dispatch(scope_event())
        listener.dispatch(NodeAdded("pkg.X", 1, ConstNode("pkg.X"), NodeKind.CONST))

        assert log == [("r", "scope"), ("r", "const")]

    def test_foreign_scopes_ignored_by_default(self):
        log = []
        Recorder(None, "r", log).dispatch(scope_event(NodeKind.FOREIGN_SCOPE))
        assert log == []

    def test_unknown_kind(self):
        listener = Recorder(None, "r", [])
        with pytest.raises(UnsupportedEventError):
            listener.dispatch(scope_event(kind="bogus"))


class TestDefaultRegistry:
    """The standard listener chain."""

    def test_default_order_without_docs(self, unit_factory):
        pkg = unit_factory.package({})
        pipeline = unit_factory.pipeline(pkg)

        expected = [name for name in LISTENER_NAMES if name != "documentation"]
        assert pipeline.listeners.names() == expected

    def test_docs_enabled(self, unit_factory):
        pkg = unit_factory.package({})
        config = Config()
        config.compiler.include_doc = True
        pipeline = unit_factory.pipeline(pkg, config=config)

        assert default_registry(pipeline).names() == list(LISTENER_NAMES)

    def test_disabled_listeners(self, unit_factory):
        pkg = unit_factory.package({})
        config = Config()
        config.listeners.disabled = ["enums", "helpers"]
        pipeline = unit_factory.pipeline(pkg, config=config)

        names = pipeline.listeners.names()
        assert "enums" not in names and "helpers" not in names
        assert names.index("mixins") < names.index("methods") < names.index("signatures")
