"""
Per-transition-system precomputation for region synthesis.

:class:`RegionUtility` fixes the event index of a transition system and
computes Parikh vectors along a canonical breadth-first spanning tree.
Every arc of the transition system that is not part of the spanning tree
(a *chord*) yields a vector ``P(s) + e - P(t)`` that the effective weight
vector of any region must annihilate; together with non-negativity these
are exactly the region conditions.

All data is computed once in the constructor and never mutated, so one
instance may be shared read-only between worker threads.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Hashable, List, Optional, Sequence, Set, Tuple, Union

import numpy as np

from ..TS.lts import Arc, TransitionSystem
from .exceptions import InvalidTransitionSystemError, MissingLocationError, RegionInvariantError

logger = logging.getLogger(__name__)

Event = Union[str, int]


class RegionUtility:
    """
    Event index and Parikh-vector machinery of one transition system.

    :param ts: The transition system.
    :type ts: TransitionSystem
    :raises InvalidTransitionSystemError: If the TS has no initial state.
    :raises MissingLocationError: If only some arcs carry a location or an
        event is assigned two different locations.

    .. code-block:: python

        utility = RegionUtility(ts)
        utility.event_list          # ['a', 'b']
        utility.get_parikh_vector("s2")
    """

    def __init__(self, ts: TransitionSystem) -> None:
        if ts.initial_state is None:
            raise InvalidTransitionSystemError("Transition system has no initial state")
        self.ts = ts
        self.initial_state = ts.initial_state

        self._events: Tuple[str, ...] = tuple(ts.alphabet)
        self._event_index: Dict[str, int] = {e: i for i, e in enumerate(self._events)}
        self._locations = self._collect_locations(ts.arcs)

        self._build_spanning_tree()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    def _collect_locations(self, arcs: Sequence[Arc]) -> Dict[str, str]:
        with_loc = [a for a in arcs if a.location is not None]
        if not with_loc:
            return {}
        if len(with_loc) != len(arcs):
            missing = sorted({a.label for a in arcs if a.location is None})
            raise MissingLocationError(f"Events without location: {', '.join(missing)}")
        locations: Dict[str, str] = {}
        for a in arcs:
            known = locations.setdefault(a.label, a.location)
            if known != a.location:
                raise MissingLocationError(
                    f"Event {a.label!r} has conflicting locations {known!r} and {a.location!r}"
                )
        return locations

    def _build_spanning_tree(self) -> None:
        order = {s: i for i, s in enumerate(self.ts.states)}
        n = len(self._events)
        graph = self.ts.graph

        parikh: Dict[Hashable, np.ndarray] = {self.initial_state: np.zeros(n, dtype=np.int64)}
        tree: List[Arc] = []
        chords: List[Arc] = []
        queue = deque([self.initial_state])
        while queue:
            s = queue.popleft()
            out = sorted(
                (
                    (self._event_index[d["label"]], order[t], t, d)
                    for _, t, d in graph.out_edges(s, data=True)
                ),
                key=lambda x: (x[0], x[1]),
            )
            for idx, _, t, d in out:
                arc = Arc(s, d["label"], t, d.get("location"))
                if t in parikh:
                    chords.append(arc)
                    continue
                vec = parikh[s].copy()
                vec[idx] += 1
                parikh[t] = vec
                tree.append(arc)
                queue.append(t)

        for vec in parikh.values():
            vec.setflags(write=False)

        self._parikh = parikh
        self._states: Tuple[Hashable, ...] = tuple(s for s in self.ts.states if s in parikh)
        self._state_index = {s: i for i, s in enumerate(self._states)}
        self._tree_arcs = tuple(tree)
        self._chord_arcs = tuple(chords)
        self._enabled: Dict[Hashable, Set[str]] = {s: set() for s in self._states}
        for a in tree + chords:
            self._enabled[a.source].add(a.label)

        unreachable = len(self.ts.states) - len(self._states)
        if unreachable:
            logger.debug("Ignoring %d state(s) unreachable from %r", unreachable, self.initial_state)

        matrix = np.zeros((len(self._states), n), dtype=np.int64)
        for s, i in self._state_index.items():
            matrix[i] = parikh[s]
        matrix.setflags(write=False)
        self._parikh_matrix = matrix

        seen: Set[Tuple[int, ...]] = set()
        vectors: List[np.ndarray] = []
        for a in chords:
            vec = parikh[a.source].copy()
            vec[self._event_index[a.label]] += 1
            vec -= parikh[a.target]
            key = tuple(int(x) for x in vec)
            if any(key) and key not in seen:
                seen.add(key)
                vectors.append(vec)
        chord_matrix = np.array(vectors, dtype=np.int64).reshape(len(vectors), n)
        chord_matrix.setflags(write=False)
        self._chord_vectors = chord_matrix

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    @property
    def event_list(self) -> List[str]:
        """Distinct event labels, index ``i`` is event ``i``."""
        return list(self._events)

    @property
    def number_of_events(self) -> int:
        return len(self._events)

    def get_event_index(self, event: Event) -> int:
        """
        Index of an event given by label or index.

        :raises KeyError: If the label is unknown.
        :raises IndexError: If the index is out of range.
        """
        if isinstance(event, (int, np.integer)) and not isinstance(event, bool):
            if not 0 <= event < len(self._events):
                raise IndexError(f"Event index {event} out of range")
            return int(event)
        try:
            return self._event_index[event]
        except KeyError:
            raise KeyError(f"Unknown event {event!r}") from None

    def get_event(self, index: int) -> str:
        return self._events[index]

    # ------------------------------------------------------------------
    # States and Parikh vectors
    # ------------------------------------------------------------------
    @property
    def states(self) -> List[Hashable]:
        """Reachable states in canonical order."""
        return list(self._states)

    def is_reachable(self, state: Hashable) -> bool:
        return state in self._parikh

    def state_index(self, state: Hashable) -> int:
        """Row of ``state`` in :attr:`parikh_matrix`."""
        try:
            return self._state_index[state]
        except KeyError:
            raise RegionInvariantError(f"State {state!r} is not reachable") from None

    def get_parikh_vector(self, state: Hashable) -> np.ndarray:
        """
        Parikh vector of the canonical spanning-tree path to ``state``.

        :returns: Read-only integer vector indexed by event.
        :raises RegionInvariantError: If ``state`` is not reachable.
        """
        try:
            return self._parikh[state]
        except KeyError:
            raise RegionInvariantError(
                f"No Parikh vector for state {state!r}: not reachable from the initial state"
            ) from None

    @property
    def parikh_matrix(self) -> np.ndarray:
        """``(n_states, n_events)`` matrix of Parikh vectors, rows follow :attr:`states`."""
        return self._parikh_matrix

    # ------------------------------------------------------------------
    # Arcs
    # ------------------------------------------------------------------
    @property
    def spanning_tree_arcs(self) -> List[Arc]:
        return list(self._tree_arcs)

    @property
    def chord_arcs(self) -> List[Arc]:
        """Reachable arcs not on the spanning tree."""
        return list(self._chord_arcs)

    @property
    def reachable_arcs(self) -> List[Arc]:
        return list(self._tree_arcs + self._chord_arcs)

    @property
    def chord_vectors(self) -> np.ndarray:
        """Distinct non-zero vectors every effective weight vector must annihilate."""
        return self._chord_vectors

    def is_enabled(self, state: Hashable, event: Event) -> bool:
        """``True`` if an arc labelled ``event`` leaves the reachable ``state``."""
        label = self._events[self.get_event_index(event)]
        return label in self._enabled.get(state, ())

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------
    @property
    def has_locations(self) -> bool:
        return bool(self._locations)

    @property
    def locations(self) -> List[str]:
        return sorted(set(self._locations.values()))

    def get_location(self, event: Event) -> Optional[str]:
        return self._locations.get(self._events[self.get_event_index(event)])

    def __repr__(self) -> str:
        return (
            f"RegionUtility(events={list(self._events)}, states={len(self._states)}, "
            f"chords={len(self._chord_vectors)})"
        )
