"""
Place/transition nets as bipartite NetworkX graphs.

Graph conventions
-----------------
Nodes:
  - Places: ``kind="place"`` with an integer ``initial`` marking.
  - Transitions: ``kind="transition"`` with a ``label`` (defaults to the id).

Edges:
  - ``weight``: positive arc multiplicity. Place -> transition edges are
    consumption (pre-set) arcs, transition -> place edges are production
    (post-set) arcs.
"""

from __future__ import annotations

from typing import Dict, Hashable, List, Optional, Set, Tuple

import networkx as nx

Marking = Dict[Hashable, int]


class PetriNet:
    """
    A place/transition net with an initial marking.

    :param name: Optional name used in ``repr``.
    :type name: str

    .. code-block:: python

        pn = PetriNet()
        p = pn.create_place("p", initial=1)
        pn.create_transition("a")
        pn.create_flow(p, "a")
        pn.is_enabled(pn.initial_marking, "a")  # True
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.graph: nx.DiGraph = nx.DiGraph()
        self._place_counter = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def create_place(self, id: Optional[Hashable] = None, initial: int = 0) -> Hashable:
        """Add a place; ids default to ``p0``, ``p1``, ..."""
        if id is None:
            id = f"p{self._place_counter}"
            while self.graph.has_node(id):
                self._place_counter += 1
                id = f"p{self._place_counter}"
        if self.graph.has_node(id):
            raise ValueError(f"Node {id!r} already exists")
        if initial < 0:
            raise ValueError(f"Initial marking of {id!r} must be non-negative")
        self._place_counter += 1
        self.graph.add_node(id, kind="place", initial=int(initial))
        return id

    def create_transition(self, id: Hashable, label: Optional[str] = None) -> Hashable:
        """Add a transition labelled ``label`` (defaults to ``id``)."""
        if self.graph.has_node(id):
            raise ValueError(f"Node {id!r} already exists")
        self.graph.add_node(id, kind="transition", label=str(id if label is None else label))
        return id

    def create_flow(self, source: Hashable, target: Hashable, weight: int = 1) -> None:
        """
        Add an arc between a place and a transition (either direction).

        :raises ValueError: If the endpoints are not one place and one
            transition, or if ``weight`` is not positive.
        """
        kinds = {self._kind(source), self._kind(target)}
        if kinds != {"place", "transition"}:
            raise ValueError(f"Flow {source!r} -> {target!r} must connect a place and a transition")
        if weight <= 0:
            raise ValueError("Flow weight must be positive")
        self.graph.add_edge(source, target, weight=int(weight))

    def _kind(self, node: Hashable) -> str:
        if not self.graph.has_node(node):
            raise KeyError(f"Unknown node {node!r}")
        return self.graph.nodes[node]["kind"]

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def places(self) -> List[Hashable]:
        return [n for n, d in self.graph.nodes(data=True) if d["kind"] == "place"]

    @property
    def transitions(self) -> List[Hashable]:
        return [n for n, d in self.graph.nodes(data=True) if d["kind"] == "transition"]

    @property
    def edges(self) -> List[Tuple[Hashable, Hashable, int]]:
        return [(u, v, d["weight"]) for u, v, d in self.graph.edges(data=True)]

    @property
    def initial_marking(self) -> Marking:
        return {p: self.graph.nodes[p]["initial"] for p in self.places}

    def label(self, transition: Hashable) -> str:
        return self.graph.nodes[transition]["label"]

    def weight(self, source: Hashable, target: Hashable) -> int:
        """Arc weight, ``0`` when there is no arc."""
        data = self.graph.get_edge_data(source, target)
        return 0 if data is None else data["weight"]

    def preset(self, node: Hashable) -> Set[Hashable]:
        return set(self.graph.predecessors(node))

    def postset(self, node: Hashable) -> Set[Hashable]:
        return set(self.graph.successors(node))

    def is_plain(self) -> bool:
        return all(w == 1 for _, _, w in self.edges)

    def is_pure(self) -> bool:
        return not any(self.graph.has_edge(v, u) for u, v in self.graph.edges)

    # ------------------------------------------------------------------
    # Firing rule
    # ------------------------------------------------------------------
    def is_enabled(self, marking: Marking, transition: Hashable) -> bool:
        return all(
            marking.get(p, 0) >= d["weight"]
            for p, _, d in self.graph.in_edges(transition, data=True)
        )

    def fire(self, marking: Marking, transition: Hashable) -> Marking:
        """
        Fire ``transition`` in ``marking`` and return the successor marking.

        :raises ValueError: If the transition is not enabled.
        """
        if not self.is_enabled(marking, transition):
            raise ValueError(f"Transition {transition!r} is not enabled")
        result = dict(marking)
        for p, _, d in self.graph.in_edges(transition, data=True):
            result[p] = result.get(p, 0) - d["weight"]
        for _, p, d in self.graph.out_edges(transition, data=True):
            result[p] = result.get(p, 0) + d["weight"]
        return result

    def __repr__(self) -> str:
        name = f" {self.name!r}" if self.name else ""
        return (
            f"PetriNet{name}(places={len(self.places)}, "
            f"transitions={len(self.transitions)}, arcs={self.graph.number_of_edges()})"
        )
