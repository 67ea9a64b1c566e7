from __future__ import annotations

from collections import deque
from typing import Hashable, Set

import networkx as nx
from networkx.algorithms.isomorphism import (
    MultiDiGraphMatcher,
    categorical_multiedge_match,
    categorical_node_match,
)

from .lts import TransitionSystem


def reachable_states(ts: TransitionSystem) -> Set[Hashable]:
    """States reachable from the initial state (empty without one)."""
    init = ts.initial_state
    if init is None:
        return set()
    seen = {init}
    queue = deque([init])
    while queue:
        s = queue.popleft()
        for t in ts.graph.successors(s):
            if t not in seen:
                seen.add(t)
                queue.append(t)
    return seen


def _reachable_part(ts: TransitionSystem) -> nx.MultiDiGraph:
    G = nx.MultiDiGraph(ts.graph.subgraph(reachable_states(ts)))
    for n in G.nodes:
        G.nodes[n]["is_initial"] = n == ts.initial_state
    return G


def is_isomorphic(ts1: TransitionSystem, ts2: TransitionSystem) -> bool:
    """
    Check whether the reachable parts of two transition systems are
    isomorphic, preserving arc labels and the initial state.

    :param ts1: First transition system.
    :param ts2: Second transition system.
    :returns: ``True`` if a label-preserving bijection between reachable
        states exists that maps initial state onto initial state.
    :rtype: bool

    .. code-block:: python

        from pnsynth.TS.isomorphism import is_isomorphic
        from pnsynth.Petri.reachability import reachability_graph

        assert is_isomorphic(ts, reachability_graph(net))
    """
    G1 = _reachable_part(ts1)
    G2 = _reachable_part(ts2)
    if (
        G1.number_of_nodes() != G2.number_of_nodes()
        or G1.number_of_edges() != G2.number_of_edges()
    ):
        return False
    gm = MultiDiGraphMatcher(
        G1,
        G2,
        node_match=categorical_node_match("is_initial", False),
        edge_match=categorical_multiedge_match("label", None),
    )
    return gm.is_isomorphic()
