"""Territory targeting generation."""

from .assembler import NoBoundaryError, generate_targeting
from .collaborators import (
    AddressResolver,
    NullAddressResolver,
    StaticTerritorySource,
    TerritorySource,
)
from .sampling import vertex_exclusion_circles

__all__ = [
    "generate_targeting",
    "NoBoundaryError",
    "AddressResolver",
    "TerritorySource",
    "NullAddressResolver",
    "StaticTerritorySource",
    "vertex_exclusion_circles",
]
