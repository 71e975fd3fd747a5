"""
Tests for Reflection — Runtime introspection over the interpreter

These tests validate:
- Name resolution through modules and attributes
- Canonical names and superclass lookup
- Definition files, methods, fields and signatures
"""

import collections
import enum
import inspect
import typing
from dataclasses import MISSING

import pytest

from introstub.core.tree import MethodKind
from introstub.runtime.reflection import UNRESOLVED, PythonReflector, type_expression


@pytest.fixture
def reflector():
    return PythonReflector()


class TestResolve:
    """Name -> object."""

    def test_resolve_module_attribute(self, reflector):
        assert reflector.resolve("collections.OrderedDict") is collections.OrderedDict

    def test_resolve_builtin(self, reflector):
        """Bare names and root-qualified names hit builtins."""
        assert reflector.resolve("int") is int
        assert reflector.resolve("builtins.int") is int

    def test_resolve_nested_class(self, reflector, unit_factory):
        pkg = unit_factory.package({
            "models.py": '''
                class Outer:
                    class Inner:
                        pass
            ''',
        })
        models = unit_factory.submodule(pkg, "models")
        assert reflector.resolve(f"{pkg.__name__}.models.Outer.Inner") is models.Outer.Inner

    def test_resolve_imports_submodule(self, reflector, unit_factory):
        """Submodules that are not imported yet are imported on demand."""
        pkg = unit_factory.package({"lazy.py": "VALUE = 1\n"})
        assert reflector.resolve(f"{pkg.__name__}.lazy.VALUE") == 1

    def test_unresolved(self, reflector):
        assert reflector.resolve("no_such_module_anywhere.Thing") is UNRESOLVED
        assert reflector.resolve("collections.NoSuchThing") is UNRESOLVED
        assert reflector.resolve("") is UNRESOLVED

    def test_failing_import_unresolved(self, reflector, unit_factory):
        """A submodule that raises while importing does not resolve."""
        pkg = unit_factory.package({"broken.py": "raise RuntimeError('boom')\n"})
        assert reflector.resolve(f"{pkg.__name__}.broken.Thing") is UNRESOLVED

    def test_module_getattr_import_error_unresolved(self, reflector, unit_factory):
        pkg = unit_factory.package({
            "__init__.py": '''
                def __getattr__(name):
                    if name.startswith("__"):
                        raise AttributeError(name)
                    raise ImportError(f"optional dependency for {name} missing")
            ''',
        })
        assert reflector.resolve(f"{pkg.__name__}.Missing") is UNRESOLVED

    def test_none_is_a_value(self, reflector, unit_factory):
        """A name bound to None resolves to None, not UNRESOLVED."""
        pkg = unit_factory.package({"__init__.py": "NOTHING = None\n"})
        assert reflector.resolve(f"{pkg.__name__}.NOTHING") is None

    def test_unresolved_is_falsy_singleton(self):
        assert not UNRESOLVED
        assert type(UNRESOLVED)() is UNRESOLVED

    def test_no_import_mode(self, unit_factory):
        pkg = unit_factory.package({"later.py": "VALUE = 1\n"})
        reflector = PythonReflector(import_modules=False)
        assert reflector.resolve(f"{pkg.__name__}.later.VALUE") is UNRESOLVED


class TestIdentity:
    """Classes, superclasses, canonical names."""

    def test_canonical_name(self, reflector):
        assert reflector.canonical_name(collections.OrderedDict) == "collections.OrderedDict"
        assert reflector.canonical_name(int) == "int"
        assert reflector.canonical_name(collections) == "collections"
        assert reflector.canonical_name(42) is None

    def test_local_class_has_no_canonical_name(self, reflector):
        def make():
            class Local:
                pass
            return Local

        assert reflector.canonical_name(make()) is None

    def test_superclass_skips_generic(self, reflector):
        T = typing.TypeVar("T")

        class Base:
            pass

        class Box(typing.Generic[T], Base):
            pass

        assert reflector.superclass_of(Box) is Base
        assert reflector.superclass_of(object) is None

    def test_type_variables(self, reflector):
        assert reflector.is_type_variable(typing.TypeVar("T"))
        assert not reflector.is_type_variable(int)

    def test_enum_member(self, reflector):
        class Color(enum.Enum):
            RED = 1

        assert reflector.is_enum_member(Color.RED)
        assert not reflector.is_enum_member(Color)
        assert reflector.enum_members_of(Color) == [("RED", 1)]


class TestStructure:
    """Members and source locations of unit classes."""

    @pytest.fixture
    def models(self, unit_factory):
        pkg = unit_factory.package({
            "models.py": '''
                from dataclasses import dataclass, field
                from typing import List, NamedTuple


                @dataclass
                class User:
                    """A user."""
                    name: str
                    tags: List[str] = field(default_factory=list)
                    LIMIT = 3

                    def greet(self, other: "User", *, loud: bool = False) -> str:
                        return other.name

                    @classmethod
                    def build(cls):
                        return cls("x")

                    @staticmethod
                    def helper():
                        pass

                    @property
                    def label(self):
                        return self.name


                class Point(NamedTuple):
                    x: int
                    y: int = 0
            ''',
        })
        return unit_factory.submodule(pkg, "models")

    def test_definition_files(self, reflector, models):
        files = reflector.definition_files(models.User)
        assert models.__file__ in files

    def test_constants_of(self, reflector, models):
        """Methods, descriptors and dunders are not constants."""
        assert reflector.constants_of(models.User) == ["LIMIT"]

    def test_methods_of(self, reflector, models):
        methods = {name: kind for name, _, kind in reflector.methods_of(models.User)}
        assert methods["greet"] == MethodKind.INSTANCE
        assert methods["build"] == MethodKind.CLASS
        assert methods["helper"] == MethodKind.STATIC
        assert methods["label"] == MethodKind.PROPERTY

    def test_module_functions_only_own(self, reflector, unit_factory):
        """Functions imported into a module are not its methods."""
        pkg = unit_factory.package({
            "__init__.py": '''
                from os.path import join

                def build():
                    pass
            ''',
        })
        methods = reflector.methods_of(pkg)
        assert [(name, kind) for name, _, kind in methods] == [("build", MethodKind.FUNCTION)]

    def test_source_file_unwraps_descriptors(self, reflector, models):
        for value in vars(models.User).values():
            if isinstance(value, (classmethod, staticmethod, property)):
                assert reflector.source_file_of(value) == models.__file__

    def test_dataclass_fields(self, reflector, models):
        fields = reflector.fields_of(models.User)
        assert [(name, default is MISSING) for name, _, default in fields] == [
            ("name", True), ("tags", False),
        ]

    def test_namedtuple_fields(self, reflector, models):
        fields = reflector.fields_of(models.Point)
        assert fields[0] == ("x", int, MISSING)
        assert fields[1] == ("y", int, 0)

    def test_docstring(self, reflector, models):
        assert reflector.docstring_of(models.User) == "A user."

    def test_inherited_docstring_ignored(self, reflector):
        class Base:
            """Base docs."""

        class Child(Base):
            pass

        assert reflector.docstring_of(Child) is None

    def test_signature_evaluates_forward_references(self, reflector, models):
        signature = reflector.signature_of(models.User.greet)
        assert signature.parameters["other"].annotation is models.User
        assert signature.return_annotation is str

    def test_signature_keeps_unresolvable_strings(self, reflector):
        def func(x: "NoSuchName"):  # noqa: F821
            pass

        signature = reflector.signature_of(func)
        assert signature.parameters["x"].annotation == "NoSuchName"

    def test_helpers(self, reflector):
        import abc

        class Shape(abc.ABC):
            @abc.abstractmethod
            def area(self):
                pass

        class Proto(typing.Protocol):
            def run(self) -> None: ...

        @typing.final
        class Leaf:
            pass

        assert reflector.is_abstract(Shape)
        assert reflector.is_protocol(Proto)
        assert not reflector.is_protocol(Shape)
        assert reflector.is_final(Leaf)


class TestTypeExpression:
    """Textual form of annotations."""

    def test_classes(self):
        assert type_expression(int) == "int"
        assert type_expression(collections.OrderedDict) == "collections.OrderedDict"

    def test_none_and_empty(self):
        assert type_expression(None) == "None"
        assert type_expression(inspect.Parameter.empty) == "Any"

    def test_generics(self):
        assert type_expression(typing.Optional[int]) == "typing.Optional[int]"
        assert type_expression(list[int]) == "list[int]"

    def test_strings_pass_through(self):
        assert type_expression("pkg.User") == "pkg.User"

    def test_name_of_is_used(self):
        assert type_expression(int, lambda cls: "custom.Int") == "custom.Int"
