"""
Shared pytest fixtures for the introstub test suite.

Provides real, importable packages through the UnitFactory so the
pipeline inspects genuine runtime objects instead of mocks.

Usage in tests:
    def test_something(unit_factory):
        pkg = unit_factory.package({"__init__.py": "class Foo: ..."})
        pipeline = unit_factory.compile(pkg, "Foo")
        assert pipeline.tree.find(f"{pkg.__name__}.Foo")
"""

import pytest

from introstub.trackers import definition, mixin
from tests.factories import UnitFactory


@pytest.fixture(autouse=True)
def trackers():
    """
    Install mixin tracking and start every test with empty trackers.

    Packages register their mixins at import time, so tracking is on
    before any test package is written.
    """
    mixin.install()
    mixin.reset()
    definition.reset()
    yield
    mixin.reset()
    definition.reset()


@pytest.fixture
def unit_factory(tmp_path, monkeypatch):
    """
    Create a UnitFactory writing packages under tmp_path.

    Example:
        def test_alias(unit_factory):
            pkg = unit_factory.package({"__init__.py": "class A: ...\\nB = A\\n"})
            pipeline = unit_factory.compile(pkg, "B")
    """
    factory = UnitFactory(tmp_path, monkeypatch)
    yield factory
    factory.cleanup()
