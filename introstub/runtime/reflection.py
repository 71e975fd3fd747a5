"""
Reflection — Runtime Introspection Service

Answers questions about live objects: what does a name resolve to,
what is an object's class, superclass and canonical name, and which
files define it.

Reflector is the interface the pipeline and listeners depend on.
PythonReflector answers over the running interpreter.

Usage:
    reflector = PythonReflector()
    obj = reflector.resolve("collections.OrderedDict")
    if obj is not UNRESOLVED:
        reflector.canonical_name(obj)       # "collections.OrderedDict"
        reflector.superclass_of(obj)        # <class 'dict'>
"""

import builtins
import dataclasses
import enum
import importlib
import inspect
import logging
import sys
import typing
from abc import ABC, abstractmethod
from types import ModuleType
from typing import Any, Dict, List, Optional, Set, Tuple

from ..core.symbols import ROOT_QUALIFIER, SEPARATOR, strip_root
from ..core.tree import MethodKind


logger = logging.getLogger(__name__)


class _Unresolved:
    """Sentinel for names that do not resolve. None is a legal value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = _Unresolved()

# Bases that carry typing machinery rather than a real superclass
TYPING_BASES = (typing.Generic, typing.Protocol)

# Functions the compiler adds to class and module namespaces
GENERATED_FUNCTIONS = ("__annotate__", "__annotate_func__")

_TYPE_VARIABLE_KINDS = tuple(
    kind for kind in (
        getattr(typing, "TypeVar", None),
        getattr(typing, "ParamSpec", None),
        getattr(typing, "TypeVarTuple", None),
    )
    if kind is not None
)


class Reflector(ABC):
    """Read-only view of a runtime object universe."""

    @abstractmethod
    def resolve(self, name: str) -> Any:
        """Object bound to the name, or UNRESOLVED."""

    @abstractmethod
    def class_of(self, obj: Any) -> type:
        """Runtime class of an object."""

    @abstractmethod
    def superclass_of(self, cls: type) -> Optional[type]:
        """Direct superclass, or None at the top of the chain."""

    @abstractmethod
    def canonical_name(self, obj: Any) -> Optional[str]:
        """Name the object declares for itself, or None if anonymous."""

    @abstractmethod
    def definition_files(self, obj: Any) -> Set[str]:
        """Source files that contribute to the object's definition."""

    @abstractmethod
    def is_namespace(self, obj: Any) -> bool:
        """True for modules and classes."""

    def is_class(self, obj: Any) -> bool:
        return inspect.isclass(obj)

    def is_module(self, obj: Any) -> bool:
        return inspect.ismodule(obj)

    def is_type_variable(self, obj: Any) -> bool:
        return False

    def is_enum_member(self, obj: Any) -> bool:
        return False

    def source_file_of(self, func: Any) -> Optional[str]:
        return None


class PythonReflector(Reflector):
    """
    Introspection over the running interpreter.

    Name resolution imports the longest importable module prefix of a
    dotted name and walks the remaining segments as attributes. Names
    without a module part resolve against builtins.

    Args:
        modules: Module table to consult before importing (defaults to
            sys.modules)
        import_modules: Import modules that are not loaded yet
    """

    def __init__(self, modules: Optional[Dict[str, ModuleType]] = None, import_modules: bool = True):
        self._modules = sys.modules if modules is None else modules
        self.import_modules = import_modules
        self._not_modules: Set[str] = set()

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, name: str) -> Any:
        name = strip_root(name)
        if not name:
            return UNRESOLVED

        parts = name.split(SEPARATOR)
        for split in range(len(parts), 0, -1):
            module = self._load_module(SEPARATOR.join(parts[:split]))
            if module is None:
                continue
            obj = self._walk(module, parts[split:])
            if obj is not UNRESOLVED:
                return obj

        return self._walk(builtins, parts)

    def _load_module(self, module_name: str) -> Optional[ModuleType]:
        module = self._modules.get(module_name)
        if module is not None or not self.import_modules or module_name in self._not_modules:
            return module
        try:
            return importlib.import_module(module_name)
        except ImportError:
            self._not_modules.add(module_name)
            return None
        except Exception as e:
            logger.debug("Importing %s failed: %s", module_name, e)
            self._not_modules.add(module_name)
            return None

    def _walk(self, obj: Any, attributes: List[str]) -> Any:
        for attribute in attributes:
            try:
                obj = getattr(obj, attribute)
            except (AttributeError, ImportError):
                return UNRESOLVED
        return obj

    # =========================================================================
    # Identity
    # =========================================================================

    def class_of(self, obj: Any) -> type:
        return type(obj)

    def superclass_of(self, cls: type) -> Optional[type]:
        for base in getattr(cls, "__bases__", ()):
            if base in TYPING_BASES:
                continue
            return base
        return None

    def canonical_name(self, obj: Any) -> Optional[str]:
        if inspect.ismodule(obj):
            return obj.__name__

        if not inspect.isclass(obj):
            return None

        qualname = getattr(obj, "__qualname__", None)
        module = getattr(obj, "__module__", None)
        if not qualname or "<" in qualname:
            return None
        if not module or module == ROOT_QUALIFIER.rstrip(SEPARATOR):
            return qualname
        return f"{module}{SEPARATOR}{qualname}"

    def is_namespace(self, obj: Any) -> bool:
        return inspect.isclass(obj) or inspect.ismodule(obj)

    def is_type_variable(self, obj: Any) -> bool:
        return bool(_TYPE_VARIABLE_KINDS) and isinstance(obj, _TYPE_VARIABLE_KINDS)

    def is_enum_member(self, obj: Any) -> bool:
        return isinstance(obj, enum.Enum)

    # =========================================================================
    # Source locations
    # =========================================================================

    def definition_files(self, obj: Any) -> Set[str]:
        """
        Candidate definition files.

        For a class: the file of its defining module plus the files of
        every function in its own namespace, so a class reopened by
        monkey-patching is attributed to both places.
        """
        files: Set[str] = set()

        if inspect.ismodule(obj):
            module_file = getattr(obj, "__file__", None)
            if module_file:
                files.add(module_file)
            return files

        if not inspect.isclass(obj):
            return files

        module = self._modules.get(getattr(obj, "__module__", ""))
        module_file = getattr(module, "__file__", None)
        if module_file:
            files.add(module_file)

        for value in vars(obj).values():
            source = self.source_file_of(value)
            if source:
                files.add(source)
        return files

    def source_file_of(self, func: Any) -> Optional[str]:
        """File a function was compiled from, unwrapping descriptors."""
        if isinstance(func, (classmethod, staticmethod)):
            func = func.__func__
        elif isinstance(func, property):
            func = func.fget
        func = inspect.unwrap(func) if callable(func) else func
        code = getattr(func, "__code__", None)
        if code is None:
            return None
        return code.co_filename

    # =========================================================================
    # Structure
    # =========================================================================

    def bases_of(self, cls: type) -> Tuple[type, ...]:
        return tuple(getattr(cls, "__bases__", ()))

    def metaclass_of(self, cls: type) -> type:
        return type(cls)

    def type_parameters_of(self, cls: type) -> List[Any]:
        """Type variables a generic class is parameterized over."""
        return list(getattr(cls, "__parameters__", ()) or ())

    def constants_of(self, obj: Any) -> List[str]:
        """
        Sorted names of nested constants.

        Functions, descriptors and dunder names are not constants.
        """
        try:
            namespace = vars(obj)
        except TypeError:
            return []

        names = []
        for name, value in namespace.items():
            if name.startswith("__"):
                continue
            if inspect.isroutine(value) or isinstance(value, (classmethod, staticmethod, property)):
                continue
            if inspect.isdatadescriptor(value) and not inspect.isclass(value):
                continue
            names.append(name)
        return sorted(set(names))

    def methods_of(self, obj: Any) -> List[Tuple[str, Any, MethodKind]]:
        """Own methods in definition order."""
        try:
            namespace = vars(obj)
        except TypeError:
            return []

        is_module = inspect.ismodule(obj)
        methods = []
        for name, value in namespace.items():
            if name in GENERATED_FUNCTIONS:
                continue
            if isinstance(value, classmethod):
                methods.append((name, value.__func__, MethodKind.CLASS))
            elif isinstance(value, staticmethod):
                methods.append((name, value.__func__, MethodKind.STATIC))
            elif isinstance(value, property):
                if value.fget is not None:
                    methods.append((name, value.fget, MethodKind.PROPERTY))
            elif inspect.isfunction(value):
                if is_module and getattr(value, "__module__", None) != obj.__name__:
                    continue
                kind = MethodKind.FUNCTION if is_module else MethodKind.INSTANCE
                methods.append((name, value, kind))
        return methods

    def fields_of(self, cls: type) -> List[Tuple[str, Any, Any]]:
        """
        Declared fields as (name, annotation, default) for dataclasses and
        NamedTuples. Missing defaults are dataclasses.MISSING.
        """
        if dataclasses.is_dataclass(cls):
            own = getattr(cls, "__annotations__", {})
            return [
                (f.name, f.type, f.default if f.default is not dataclasses.MISSING else f.default_factory)
                for f in dataclasses.fields(cls)
                if f.name in own
            ]

        if isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, "_fields"):
            annotations = getattr(cls, "__annotations__", {})
            defaults = getattr(cls, "_field_defaults", {})
            return [
                (name, annotations.get(name, Any), defaults.get(name, dataclasses.MISSING))
                for name in cls._fields
            ]
        return []

    def enum_members_of(self, cls: type) -> List[Tuple[str, Any]]:
        if not (inspect.isclass(cls) and issubclass(cls, enum.Enum)):
            return []
        return [(name, member.value) for name, member in cls.__members__.items() if member.name == name]

    def docstring_of(self, obj: Any) -> Optional[str]:
        doc = getattr(obj, "__doc__", None)
        if not isinstance(doc, str) or not doc.strip():
            return None
        if inspect.isclass(obj):
            for base in obj.__mro__[1:]:
                if getattr(base, "__doc__", None) is doc:
                    return None
        return inspect.cleandoc(doc)

    def signature_of(self, func: Any) -> Optional[inspect.Signature]:
        """
        Runtime signature with string annotations evaluated where possible.
        None for callables that expose no signature (some builtins).
        """
        try:
            return inspect.signature(func, eval_str=True)
        except (NameError, SyntaxError, AttributeError, TypeError):
            # Unresolvable forward references keep their string form
            pass
        except ValueError:
            return None
        try:
            return inspect.signature(func)
        except (TypeError, ValueError):
            return None

    # =========================================================================
    # Helpers
    # =========================================================================

    def is_abstract(self, cls: type) -> bool:
        return inspect.isabstract(cls)

    def is_final(self, cls: type) -> bool:
        return getattr(cls, "__final__", False) is True

    def is_protocol(self, cls: type) -> bool:
        return getattr(cls, "_is_protocol", False) is True


def type_expression(annotation: Any, name_of=None) -> str:
    """
    Textual form of a type annotation.

    Classes are spelled with their canonical name (through name_of when
    given); everything else uses its repr with the typing prefix kept.
    """
    if annotation is inspect.Parameter.empty:
        return "Any"
    if annotation is None or annotation is type(None):
        return "None"
    if isinstance(annotation, str):
        return annotation
    if inspect.isclass(annotation) and not typing.get_args(annotation):
        name = name_of(annotation) if name_of else None
        if name is None:
            name = annotation.__qualname__ if annotation.__module__ == "builtins" else (
                f"{annotation.__module__}.{annotation.__qualname__}"
            )
        return name
    return _sanitize(repr(annotation))


def _sanitize(text: str) -> str:
    return text.replace("<class '", "").replace("'>", "").replace("NoneType", "None")
