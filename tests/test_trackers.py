"""
Tests for Trackers — Write-time composition and definition registries

These tests validate:
- Identity-keyed registration and lookup
- Caller locations
- Registration is inert until install()
"""

from introstub.trackers import definition, mixin
from introstub.trackers.mixin import MixinKind


class Target:
    pass


class Mixin:
    pass


class TestMixinTracker:
    """Composition registry."""

    def test_register_and_lookup(self):
        mixin.register(Target, Mixin, MixinKind.INCLUDE, location="/src/app.py:3")

        assert mixin.constants_with_mixin(Mixin) == [(Target, MixinKind.INCLUDE, "/src/app.py:3")]
        locations = mixin.mixin_locations_for(Target)
        assert locations[MixinKind.INCLUDE] == {Mixin: "/src/app.py:3"}
        assert locations[MixinKind.PREPEND] == {}

    def test_unknown_target(self):
        locations = mixin.mixin_locations_for(Target)
        assert set(locations) == set(MixinKind)
        assert all(not entries for entries in locations.values())
        assert mixin.constants_with_mixin(Mixin) == []

    def test_identity_not_name(self):
        """A different class with the same name is a different target."""
        Renamed = type("Target", (), {})
        mixin.register(Renamed, Mixin, MixinKind.EXTEND, location="a.py:1")

        assert mixin.mixin_locations_for(Target)[MixinKind.EXTEND] == {}
        assert mixin.mixin_locations_for(Renamed)[MixinKind.EXTEND] == {Mixin: "a.py:1"}

    def test_default_location_is_caller(self):
        mixin.register(Target, Mixin, MixinKind.INCLUDE)

        (_, _, location), = mixin.constants_with_mixin(Mixin)
        assert mixin.location_path(location) == __file__

    def test_location_path(self):
        assert mixin.location_path("/src/app.py:12") == "/src/app.py"
        assert mixin.location_path("C:/src/app.py:12") == "C:/src/app.py"
        assert mixin.location_path("no-line") == "no-line"

    def test_inert_until_installed(self, monkeypatch):
        monkeypatch.setattr(mixin, "_installed", False)
        mixin.register(Target, Mixin, MixinKind.INCLUDE, location="a.py:1")

        assert mixin.constants_with_mixin(Mixin) == []
        assert not mixin.is_installed()

    def test_install_idempotent(self):
        """The autouse fixture already installed tracking."""
        assert mixin.is_installed()
        assert mixin.install() is False

    def test_reset(self):
        mixin.register(Target, Mixin, MixinKind.INCLUDE, location="a.py:1")
        mixin.reset()
        assert mixin.constants_with_mixin(Mixin) == []


class TestDefinitionTracker:
    """Extra definition sites."""

    def test_register_files(self):
        definition.register(Target, "/src/a.py")
        definition.register(Target, "/src/b.py")
        assert definition.files_for(Target) == {"/src/a.py", "/src/b.py"}

    def test_unknown_object(self):
        assert definition.files_for(Mixin) == set()

    def test_returns_copy(self):
        definition.register(Target, "/src/a.py")
        definition.files_for(Target).add("/elsewhere.py")
        assert definition.files_for(Target) == {"/src/a.py"}
