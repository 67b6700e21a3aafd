"""Application services: store listing, lookup, updates and rendering."""

from .locator import ResolvedInvocation, TemplateInvocation, TemplateLocator, parse_invocation
from .store_index import list_store, list_templates
from .store_update import CollectionUpdate, StoreUpdater, UpdateReport

__all__ = [
    "CollectionUpdate",
    "ResolvedInvocation",
    "StoreUpdater",
    "TemplateInvocation",
    "TemplateLocator",
    "UpdateReport",
    "list_store",
    "list_templates",
    "parse_invocation",
]
