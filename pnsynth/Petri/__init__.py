from .net import Marking, PetriNet
from .reachability import ReachabilityGraph, UnboundedNetError, reachability_graph
from .structure import (
    is_conflict_free,
    is_merge_free,
    is_strongly_connected,
    strongly_connected_components,
)

__all__ = [
    "Marking",
    "PetriNet",
    "ReachabilityGraph",
    "UnboundedNetError",
    "reachability_graph",
    "is_conflict_free",
    "is_merge_free",
    "is_strongly_connected",
    "strongly_connected_components",
]
