"""
Labelled transition systems.

A :class:`TransitionSystem` is a thin wrapper around a
:class:`networkx.MultiDiGraph`:

- Nodes: states, in insertion order (the canonical state order).
- Edges: arcs with a ``label`` attribute (the event) and an optional
  ``location`` attribute.
- Graph attribute ``initial``: the designated initial state.

The wrapper only adds bookkeeping that the synthesis code relies on
(stable ordering, the initial state, label lookups); all graph
algorithms are delegated to NetworkX via :attr:`TransitionSystem.graph`.
"""

from __future__ import annotations

from typing import Hashable, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import networkx as nx


class Arc(NamedTuple):
    """A labelled arc ``source --label--> target``."""

    source: Hashable
    label: str
    target: Hashable
    location: Optional[str] = None


class TransitionSystem:
    """
    Finite labelled transition system with a designated initial state.

    :param name: Optional name used in ``repr``.
    :type name: str

    .. code-block:: python

        ts = TransitionSystem()
        s, t = ts.create_states("s", "t")
        ts.initial_state = s
        ts.create_arc(s, t, "a")
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.graph: nx.MultiDiGraph = nx.MultiDiGraph()
        self.graph.graph["initial"] = None
        self._counter = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_arcs(
        cls,
        arcs: Iterable[Tuple[Hashable, str, Hashable]],
        initial: Hashable,
        states: Sequence[Hashable] = (),
    ) -> "TransitionSystem":
        """
        Build a transition system from ``(source, label, target)`` triples.

        States are created in the order given by ``states`` followed by the
        order of first appearance in ``arcs``; the initial state is created
        first if it is not listed anywhere else.

        :param arcs: Iterable of ``(source, label, target)`` triples.
        :param initial: The initial state.
        :param states: Optional explicit state order (may include isolated states).
        :returns: New transition system.
        :rtype: TransitionSystem
        """
        ts = cls()
        arcs = list(arcs)
        order: List[Hashable] = [initial] if initial not in states else []
        order.extend(states)
        for src, _, dst in arcs:
            order.extend((src, dst))
        for s in order:
            if not ts.graph.has_node(s):
                ts.create_state(s)
        ts.initial_state = initial
        for src, label, dst in arcs:
            ts.create_arc(src, dst, label)
        return ts

    def create_state(self, name: Optional[Hashable] = None) -> Hashable:
        """
        Add a state and return its identifier.

        :param name: State identifier; ``s0``, ``s1``, ... when omitted.
        :raises ValueError: If the state already exists.
        """
        if name is None:
            name = f"s{self._counter}"
            while self.graph.has_node(name):
                self._counter += 1
                name = f"s{self._counter}"
        if self.graph.has_node(name):
            raise ValueError(f"State {name!r} already exists")
        self._counter += 1
        self.graph.add_node(name)
        return name

    def create_states(self, *names: Hashable) -> List[Hashable]:
        """Add several states at once and return them in order."""
        return [self.create_state(n) for n in names]

    def create_arc(
        self,
        source: Hashable,
        target: Hashable,
        label: str,
        location: Optional[str] = None,
    ) -> Arc:
        """
        Add an arc labelled ``label``.

        Adding an arc that already exists (same source, label, target) is a
        no-op; a transition system is a relation, not a multiset of arcs.

        :raises KeyError: If one of the states does not exist.
        """
        for s in (source, target):
            if not self.graph.has_node(s):
                raise KeyError(f"Unknown state {s!r}")
        label = str(label)
        if self.graph.has_edge(source, target, key=label):
            data = self.graph.edges[source, target, label]
            return Arc(source, label, target, data.get("location"))
        attrs = {"label": label}
        if location is not None:
            attrs["location"] = str(location)
        self.graph.add_edge(source, target, key=label, **attrs)
        return Arc(source, label, target, attrs.get("location"))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def initial_state(self) -> Optional[Hashable]:
        return self.graph.graph.get("initial")

    @initial_state.setter
    def initial_state(self, state: Hashable) -> None:
        if not self.graph.has_node(state):
            raise KeyError(f"Unknown state {state!r}")
        self.graph.graph["initial"] = state

    @property
    def states(self) -> List[Hashable]:
        """States in canonical (insertion) order."""
        return list(self.graph.nodes)

    @property
    def arcs(self) -> List[Arc]:
        """All arcs, ordered by source state and insertion."""
        return [
            Arc(u, d["label"], v, d.get("location"))
            for u, v, d in self.graph.edges(data=True)
        ]

    @property
    def alphabet(self) -> List[str]:
        """Sorted list of distinct event labels."""
        return sorted({d["label"] for _, _, d in self.graph.edges(data=True)})

    def post_events(self, state: Hashable) -> List[str]:
        """Sorted labels of arcs leaving ``state``."""
        return sorted({d["label"] for _, _, d in self.graph.out_edges(state, data=True)})

    def successors(self, state: Hashable, label: str) -> List[Hashable]:
        """Targets of ``label``-arcs leaving ``state``."""
        return [v for _, v, d in self.graph.out_edges(state, data=True) if d["label"] == label]

    def __contains__(self, state: Hashable) -> bool:
        return self.graph.has_node(state)

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __repr__(self) -> str:
        name = f" {self.name!r}" if self.name else ""
        return (
            f"TransitionSystem{name}(states={self.graph.number_of_nodes()}, "
            f"arcs={self.graph.number_of_edges()}, initial={self.initial_state!r})"
        )
