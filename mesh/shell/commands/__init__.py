"""Import builtin modules for their registration side-effects."""

from . import meta as _meta  # noqa: F401
from . import navigation as _navigation  # noqa: F401

__all__ = []
