"""
Regions of a transition system.

A region is a pair of non-negative integer weight vectors indexed by event
(backward weights ``b``, forward weights ``f``) together with a normal
(initial) marking ``m0``. Its effective weight is ``w = f - b`` and its
marking at a state ``s`` with Parikh vector ``p`` is ``m0 + p . w``.
A region is *valid* for its transition system if this marking is the same
along every path (every chord vector annihilates ``w``), never negative, and
every arc ``s --e--> t`` is fireable (``m(s) >= b(e)``).

:class:`AbstractRegion` is the public contract consumed by the separation
engine and the net constructor; :class:`Region` is the immutable value type
produced by the search.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Hashable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import NotCombinableError, RegionInvariantError
from .region_utility import Event, RegionUtility

if TYPE_CHECKING:  # pragma: no cover
    from .properties import PNProperties


class AbstractRegion(ABC):
    """
    Interface of a region.

    Implementations provide the utility, per-event weights and the normal
    marking; everything else is derived here.
    """

    @property
    @abstractmethod
    def utility(self) -> RegionUtility:
        raise NotImplementedError

    @abstractmethod
    def get_backward_weight(self, event: Event) -> int:
        """Tokens consumed by ``event`` (label or index)."""
        raise NotImplementedError

    @abstractmethod
    def get_forward_weight(self, event: Event) -> int:
        """Tokens produced by ``event`` (label or index)."""
        raise NotImplementedError

    @property
    @abstractmethod
    def normal_marking(self) -> int:
        """Marking of the initial state."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------
    def get_weight(self, event: Event) -> int:
        """Effective weight ``f(e) - b(e)``."""
        return self.get_forward_weight(event) - self.get_backward_weight(event)

    def weight_vector(self) -> np.ndarray:
        n = self.utility.number_of_events
        return np.array([self.get_weight(i) for i in range(n)], dtype=np.int64)

    def evaluate_parikh_vector(self, parikh: Sequence[int]) -> int:
        """``m0 + sum_e p(e) * w(e)``."""
        n = self.utility.number_of_events
        if len(parikh) != n:
            raise ValueError(f"Parikh vector has length {len(parikh)}, expected {n}")
        return self.normal_marking + sum(int(p) * self.get_weight(i) for i, p in enumerate(parikh))

    def get_marking(self, state: Hashable) -> int:
        """Marking of a reachable state."""
        return self.evaluate_parikh_vector(self.utility.get_parikh_vector(state))

    def markings(self) -> np.ndarray:
        """Markings of all reachable states in :attr:`RegionUtility.states` order."""
        return self.normal_marking + self.utility.parikh_matrix @ self.weight_vector()

    @property
    def preset_events(self) -> List[str]:
        """Events producing on this region."""
        u = self.utility
        return [e for i, e in enumerate(u.event_list) if self.get_forward_weight(i) > 0]

    @property
    def postset_events(self) -> List[str]:
        """Events consuming from this region."""
        u = self.utility
        return [e for i, e in enumerate(u.event_list) if self.get_backward_weight(i) > 0]

    def is_pure(self) -> bool:
        n = self.utility.number_of_events
        return not any(self.get_backward_weight(i) and self.get_forward_weight(i) for i in range(n))

    def is_plain(self) -> bool:
        n = self.utility.number_of_events
        return all(
            self.get_backward_weight(i) <= 1 and self.get_forward_weight(i) <= 1 for i in range(n)
        )

    def satisfies(self, properties: "PNProperties") -> bool:
        """``True`` if this region meets every constraint of ``properties``."""
        return properties.check_region(self)

    # ------------------------------------------------------------------
    # Separation
    # ------------------------------------------------------------------
    def solves_ssp(self, s: Hashable, t: Hashable) -> bool:
        """``True`` if the markings of ``s`` and ``t`` differ."""
        return self.get_marking(s) != self.get_marking(t)

    def solves_essp(self, event: Event, state: Hashable) -> bool:
        """``True`` if ``event`` needs more tokens than ``state`` holds."""
        return self.get_marking(state) < self.get_backward_weight(event)

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------
    def violations(self) -> List[str]:
        """Human-readable list of region-axiom violations (empty if valid)."""
        u = self.utility
        problems: List[str] = []
        if self.normal_marking < 0:
            problems.append(f"negative initial marking {self.normal_marking}")
        for i in range(u.number_of_events):
            if self.get_backward_weight(i) < 0 or self.get_forward_weight(i) < 0:
                problems.append(f"negative weight for event {u.get_event(i)!r}")
        for arc in u.reachable_arcs:
            ms = self.get_marking(arc.source)
            mt = self.get_marking(arc.target)
            if ms + self.get_weight(arc.label) != mt:
                problems.append(
                    f"inconsistent marking along {arc.source!r} --{arc.label}--> {arc.target!r}: "
                    f"{ms} + {self.get_weight(arc.label)} != {mt}"
                )
            if ms < self.get_backward_weight(arc.label):
                problems.append(f"{arc.label!r} not fireable at {arc.source!r} (marking {ms})")
        for s, m in zip(u.states, self.markings()):
            if m < 0:
                problems.append(f"negative marking {int(m)} at {s!r}")
        return problems

    def is_valid(self) -> bool:
        return not self.violations()

    def check_axiom(self) -> None:
        """
        Assert the region axiom.

        :raises RegionInvariantError: If the region is not valid for its TS.
        """
        problems = self.violations()
        if problems:
            raise RegionInvariantError(f"Invalid region {self!r}: " + "; ".join(problems))

    def __repr__(self) -> str:
        u = self.utility
        parts = [f"m0={self.normal_marking}"]
        for i, e in enumerate(u.event_list):
            b, f = self.get_backward_weight(i), self.get_forward_weight(i)
            if b or f:
                parts.append(f"{e}:{b}>{f}")
        return "{" + ", ".join(parts) + "}"


class Region(AbstractRegion):
    """
    Immutable region value.

    :param utility: The region utility of the transition system.
    :type utility: RegionUtility
    :param backward: Backward weight per event index.
    :param forward: Forward weight per event index.
    :param normal_marking: Initial marking.
    :raises ValueError: On length mismatch or negative entries.

    Two regions are equal iff they share the utility and all weights and the
    normal marking agree; this is what deduplicates the region basis.
    """

    __slots__ = ("_utility", "_backward", "_forward", "_normal_marking", "_hash")

    def __init__(
        self,
        utility: RegionUtility,
        backward: Sequence[int],
        forward: Sequence[int],
        normal_marking: int,
    ) -> None:
        n = utility.number_of_events
        backward = tuple(int(x) for x in backward)
        forward = tuple(int(x) for x in forward)
        if len(backward) != n or len(forward) != n:
            raise ValueError(f"Weight vectors must have length {n}")
        if any(x < 0 for x in backward + forward):
            raise ValueError("Weights must be non-negative")
        if normal_marking < 0:
            raise ValueError("Normal marking must be non-negative")
        self._utility = utility
        self._backward = backward
        self._forward = forward
        self._normal_marking = int(normal_marking)
        self._hash = hash((id(utility), backward, forward, self._normal_marking))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def from_weights(
        cls, utility: RegionUtility, weights: Sequence[int], normal_marking: int
    ) -> "Region":
        """Pure region with effective weights ``weights``."""
        return cls(
            utility,
            [max(0, -int(w)) for w in weights],
            [max(0, int(w)) for w in weights],
            normal_marking,
        )

    @classmethod
    def counting_region(cls, utility: RegionUtility, event: Event) -> "Region":
        """
        Pure, plain region where ``event`` consumes one token per occurrence.

        The initial marking is the largest occurrence count of ``event`` over
        the reachable states; the result is valid whenever every cycle of the
        transition system avoids ``event`` (in particular for words).
        """
        idx = utility.get_event_index(event)
        counts = utility.parikh_matrix[:, idx]
        m0 = int(counts.max()) if counts.size else 0
        for arc in utility.reachable_arcs:
            # stays fireable at the source of every arc
            if utility.get_event_index(arc.label) == idx:
                m0 = max(m0, int(utility.get_parikh_vector(arc.source)[idx]) + 1)
        weights = [0] * utility.number_of_events
        weights[idx] = -1
        return cls.from_weights(utility, weights, m0)

    # ------------------------------------------------------------------
    # AbstractRegion interface
    # ------------------------------------------------------------------
    @property
    def utility(self) -> RegionUtility:
        return self._utility

    def get_backward_weight(self, event: Event) -> int:
        return self._backward[self._utility.get_event_index(event)]

    def get_forward_weight(self, event: Event) -> int:
        return self._forward[self._utility.get_event_index(event)]

    @property
    def normal_marking(self) -> int:
        return self._normal_marking

    @property
    def backward(self) -> Tuple[int, ...]:
        return self._backward

    @property
    def forward(self) -> Tuple[int, ...]:
        return self._forward

    def weight_vector(self) -> np.ndarray:
        return np.subtract(self._forward, self._backward, dtype=np.int64)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def __add__(self, other: "Region") -> "Region":
        if not isinstance(other, Region):
            return NotImplemented
        if other._utility is not self._utility:
            raise NotCombinableError("Regions belong to different transition systems")
        return Region(
            self._utility,
            [a + b for a, b in zip(self._backward, other._backward)],
            [a + b for a, b in zip(self._forward, other._forward)],
            self._normal_marking + other._normal_marking,
        )

    def scale(self, factor: int) -> "Region":
        """Multiply all weights and the normal marking by ``factor >= 0``."""
        if factor < 0:
            raise NotCombinableError("Regions can only be scaled by non-negative factors")
        return Region(
            self._utility,
            [factor * x for x in self._backward],
            [factor * x for x in self._forward],
            factor * self._normal_marking,
        )

    def __mul__(self, factor: int) -> "Region":
        if not isinstance(factor, int):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    @classmethod
    def combine(
        cls,
        regions: Sequence["Region"],
        coefficients: Iterable[int],
        properties: Optional["PNProperties"] = None,
    ) -> "Region":
        """
        Non-negative integer linear combination ``sum_i c_i * r_i``.

        Backward and forward weights are added separately, so a combination
        may make an event both consume from and produce on the region. Under
        ``pure`` such a result is not combinable.

        :param regions: Regions of one transition system (at least one).
        :param coefficients: One non-negative integer per region.
        :param properties: Constraints the result must satisfy.
        :raises NotCombinableError: For negative coefficients, mixed
            utilities, or a result violating ``properties``.
        """
        regions = list(regions)
        coefficients = [int(c) for c in coefficients]
        if not regions:
            raise NotCombinableError("Nothing to combine")
        if len(coefficients) != len(regions):
            raise NotCombinableError("Need exactly one coefficient per region")
        result = regions[0].scale(coefficients[0])
        for region, c in zip(regions[1:], coefficients[1:]):
            result = result + region.scale(c)
        if properties is not None and not result.satisfies(properties):
            raise NotCombinableError(f"Combination {result!r} violates {properties}")
        return result

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        return (
            self._utility is other._utility
            and self._normal_marking == other._normal_marking
            and self._backward == other._backward
            and self._forward == other._forward
        )

    def __hash__(self) -> int:
        return self._hash
