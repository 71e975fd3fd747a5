"""
Listeners — Enrichment observers for declaration nodes

Each listener is notified once per NodeAdded event, in the order
they are registered. The default order matters: mixins are recorded
before methods, method nodes exist before signatures fill them in,
and empty payload scopes are pruned last.

Usage:
    from introstub.listeners import default_registry

    registry = default_registry(pipeline)
    registry.names()   # ["type_variables", "mixins", ...]
"""

from typing import TYPE_CHECKING

from .base import Listener
from .registry import ListenerRegistry
from .type_variables import TypeVariablesListener
from .mixins import MixinsListener
from .metaclass import MetaclassListener
from .methods import MethodsListener
from .helpers import HelpersListener
from .enums import EnumsListener
from .fields import FieldsListener
from .signatures import SignaturesListener
from .subconstants import SubconstantsListener
from .documentation import DocumentationListener
from .foreign_constants import ForeignConstantsListener
from .remove_empty_payload_scopes import RemoveEmptyPayloadScopesListener

if TYPE_CHECKING:
    from ..core.pipeline import Pipeline


DEFAULT_LISTENERS = (
    TypeVariablesListener,
    MixinsListener,
    MetaclassListener,
    MethodsListener,
    HelpersListener,
    EnumsListener,
    FieldsListener,
    SignaturesListener,
    SubconstantsListener,
    DocumentationListener,
    ForeignConstantsListener,
    RemoveEmptyPayloadScopesListener,
)


def default_registry(pipeline: 'Pipeline') -> ListenerRegistry:
    """
    Build the standard listener chain for a pipeline.

    Listeners disabled in config are left out; documentation only runs
    when compiler.include_doc is set.
    """
    config = pipeline.config
    registry = ListenerRegistry()

    for listener_cls in DEFAULT_LISTENERS:
        if not config.listeners.is_enabled(listener_cls.name):
            continue
        if listener_cls is DocumentationListener and not config.compiler.include_doc:
            continue
        registry.register(listener_cls(pipeline))

    return registry


__all__ = [
    'Listener',
    'ListenerRegistry',
    'DEFAULT_LISTENERS',
    'default_registry',
    'TypeVariablesListener',
    'MixinsListener',
    'MetaclassListener',
    'MethodsListener',
    'HelpersListener',
    'EnumsListener',
    'FieldsListener',
    'SignaturesListener',
    'SubconstantsListener',
    'DocumentationListener',
    'ForeignConstantsListener',
    'RemoveEmptyPayloadScopesListener',
]
