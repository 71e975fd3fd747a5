"""Runtime introspection over the live interpreter."""

from .reflection import Reflector, PythonReflector, UNRESOLVED, type_expression

__all__ = ['Reflector', 'PythonReflector', 'UNRESOLVED', 'type_expression']
