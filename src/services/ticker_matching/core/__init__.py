"""
Core ticker matching logic.

This module contains the matching layers and the evidence reducer,
independent of any data source or framework.
"""

from .models import (
    Alias,
    Entity,
    Hit,
    MatchEvidence,
    MatchMethod,
    MatchResult,
    ResolutionMethod,
)
from .registry import RegistryCache, RegistrySnapshot, RegistrySource

__all__ = [
    "Alias",
    "Entity",
    "Hit",
    "MatchEvidence",
    "MatchMethod",
    "MatchResult",
    "RegistryCache",
    "RegistrySnapshot",
    "RegistrySource",
    "ResolutionMethod",
]
