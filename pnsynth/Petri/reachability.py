from __future__ import annotations

from collections import deque
from typing import Dict, Hashable, Optional, Tuple

from ..TS.lts import TransitionSystem
from .net import Marking, PetriNet

__all__ = ["ReachabilityGraph", "UnboundedNetError", "reachability_graph"]


class UnboundedNetError(RuntimeError):
    """Raised when the reachability set of a net is (or may be) infinite."""


class ReachabilityGraph(TransitionSystem):
    """
    Transition system of reachable markings.

    The marking of every state is kept in :attr:`markings`; states are named
    ``m0``, ``m1``, ... in breadth-first discovery order.
    """

    def __init__(self, net: PetriNet) -> None:
        super().__init__(name=f"RG({net.name})" if net.name else "RG")
        self.places = tuple(net.places)
        self.markings: Dict[Hashable, Marking] = {}


def _key(places: Tuple[Hashable, ...], marking: Marking) -> Tuple[int, ...]:
    return tuple(marking.get(p, 0) for p in places)


def _strictly_covers(big: Tuple[int, ...], small: Tuple[int, ...]) -> bool:
    return big != small and all(b >= s for b, s in zip(big, small))


def reachability_graph(net: PetriNet, *, max_states: Optional[int] = None) -> ReachabilityGraph:
    """
    Build the reachability graph of a bounded net.

    Transitions are explored in the net's node order; arcs of the result are
    labelled with the transition labels.

    :param net: The Petri net.
    :type net: PetriNet
    :param max_states: Optional hard limit on the number of markings.
    :type max_states: int or None
    :returns: The reachability graph, initial state ``m0``.
    :rtype: ReachabilityGraph
    :raises UnboundedNetError: If a reached marking strictly covers one of
        its ancestors (the net is unbounded) or ``max_states`` is exceeded.
    """
    rg = ReachabilityGraph(net)
    places = rg.places
    transitions = net.transitions

    init = net.initial_marking
    init_key = _key(places, init)
    ids: Dict[Tuple[int, ...], Hashable] = {init_key: rg.create_state("m0")}
    rg.markings["m0"] = init
    rg.initial_state = "m0"
    parent: Dict[Tuple[int, ...], Optional[Tuple[int, ...]]] = {init_key: None}

    queue = deque([(init_key, init)])
    while queue:
        key, marking = queue.popleft()
        for t in transitions:
            if not net.is_enabled(marking, t):
                continue
            succ = net.fire(marking, t)
            succ_key = _key(places, succ)
            if succ_key not in ids:
                ancestor: Optional[Tuple[int, ...]] = key
                while ancestor is not None:
                    if _strictly_covers(succ_key, ancestor):
                        raise UnboundedNetError(
                            f"Marking {succ_key} strictly covers ancestor {ancestor}"
                        )
                    ancestor = parent[ancestor]
                if max_states is not None and len(ids) >= max_states:
                    raise UnboundedNetError(f"More than {max_states} reachable markings")
                state = rg.create_state(f"m{len(ids)}")
                ids[succ_key] = state
                rg.markings[state] = succ
                parent[succ_key] = key
                queue.append((succ_key, succ))
            rg.create_arc(ids[key], ids[succ_key], net.label(t))
    return rg
