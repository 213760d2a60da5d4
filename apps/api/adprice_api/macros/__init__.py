"""Creative macro substitution module."""

from adprice_api.macros.substitution import (
    MacroResolutionError,
    MacroValues,
    render_creative,
    resolve_macros,
    substitute_macros,
)

__all__ = [
    "MacroResolutionError",
    "MacroValues",
    "render_creative",
    "resolve_macros",
    "substitute_macros",
]
