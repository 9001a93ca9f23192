"""OpenUSim user-facing API facade.

This package re-exports the primary user API from the internal package `usim`,
so users can simply do `import OpenUSim as ous`.
"""

from usim import *  # noqa: F401,F403 - intentionally re-export everything
from usim import __all__ as _usim_all

__all__ = list(_usim_all)
