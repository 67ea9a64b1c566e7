"""
Structural predicates on nets and transition systems.

These checks need no search; they are direct graph predicates used to
inspect synthesised nets:

* conflict-freeness: every place ``s`` satisfies
  :math:`|s^\\bullet| \\leq 1 \\vee s^\\bullet \\subseteq {}^\\bullet s`,
* merge-freeness: no place has more than one producing transition,
* strong connectivity of a net or a transition system.
"""

from __future__ import annotations

from typing import Any, Hashable, List, Set

import networkx as nx

from ..TS.lts import TransitionSystem
from .net import PetriNet


def is_conflict_free(net: PetriNet) -> bool:
    """
    Check whether a plain net is conflict-free.

    :raises ValueError: If the net is not plain.
    """
    if not net.is_plain():
        raise ValueError("Conflict-freeness is only defined for plain nets")
    for p in net.places:
        post = net.postset(p)
        if len(post) > 1 and not post <= net.preset(p):
            return False
    return True


def is_merge_free(net: PetriNet) -> bool:
    """Check that no place is produced by more than one transition."""
    return all(len(net.preset(p)) <= 1 for p in net.places)


def _as_digraph(graph: Any) -> nx.DiGraph:
    if isinstance(graph, (PetriNet, TransitionSystem)):
        return nx.DiGraph(graph.graph)
    if isinstance(graph, nx.Graph):
        return nx.DiGraph(graph)
    raise TypeError(f"Unsupported graph type: {type(graph).__name__}")


def strongly_connected_components(graph: Any) -> List[Set[Hashable]]:
    """
    Strongly connected components of a net, a transition system or a
    NetworkX graph, largest first.
    """
    comps = nx.strongly_connected_components(_as_digraph(graph))
    return sorted((set(c) for c in comps), key=len, reverse=True)


def is_strongly_connected(graph: Any) -> bool:
    """``True`` if there is at most one strongly connected component."""
    return len(strongly_connected_components(graph)) <= 1
