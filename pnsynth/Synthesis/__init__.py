"""
Public API for :mod:`pnsynth.Synthesis`.

Re-exported classes
-------------------
- :class:`~pnsynth.Synthesis.synthesize.SynthesizePN`
- :class:`~pnsynth.Synthesis.properties.PNProperties`
- :class:`~pnsynth.Synthesis.region_utility.RegionUtility`
- :class:`~pnsynth.Synthesis.region.Region`
- :class:`~pnsynth.Synthesis.word.WordSynthesis`
"""

from __future__ import annotations

from typing import List

from .exceptions import (
    ConfigurationError,
    InvalidTransitionSystemError,
    MissingLocationError,
    NotCombinableError,
    PropertyError,
    RegionInvariantError,
    SolverError,
    SynthesisCancelled,
    SynthesisError,
)
from .properties import PNProperties
from .region_utility import RegionUtility
from .region import AbstractRegion, Region
from .region_search import RegionSearch
from .separation import (
    EventStateSeparationProblem,
    SeparationEngine,
    SeparationResult,
    StateSeparationProblem,
)
from .net_builder import synthesize_petri_net
from .synthesize import SynthesizePN
from .word import WordSynthesis, format_separation_failures

__all__: List[str] = [
    "SynthesisError",
    "ConfigurationError",
    "PropertyError",
    "MissingLocationError",
    "InvalidTransitionSystemError",
    "RegionInvariantError",
    "NotCombinableError",
    "SolverError",
    "SynthesisCancelled",
    "PNProperties",
    "RegionUtility",
    "AbstractRegion",
    "Region",
    "RegionSearch",
    "StateSeparationProblem",
    "EventStateSeparationProblem",
    "SeparationEngine",
    "SeparationResult",
    "synthesize_petri_net",
    "SynthesizePN",
    "WordSynthesis",
    "format_separation_failures",
]
