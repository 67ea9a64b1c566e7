"""
Exact search for a single separating region.

Finding a region that solves one separation problem is an integer linear
feasibility problem over the weight vectors. It is solved with
:func:`scipy.optimize.milp` (HiGHS), minimising the total arc weight plus the
initial marking so that small regions are preferred.

Variable layout
---------------
* impure mode: ``[b(e_0..e_n-1), f(e_0..e_n-1), m0, (z)]``
* pure mode:   ``[w(e_0..e_n-1), m0, |w|(e_0..e_n-1), (z)]``

``z`` only exists for k-marking (``m0 = k * z``). In pure mode the
backward/forward weights are ``max(0, -w)`` and ``max(0, w)``; fireability of
every arc then reduces to non-negativity of the target marking.

Constraints that are not linear (a single consumer, a single producer, one
location per consumer set) are handled by enumerating the admissible event
sets in a fixed order and fixing variable bounds for every other event.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from itertools import product
from typing import FrozenSet, Hashable, Iterator, List, Optional, Tuple

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

from .exceptions import (
    MissingLocationError,
    RegionInvariantError,
    SolverError,
    SynthesisCancelled,
)
from .properties import PNProperties
from .region import Region
from .region_utility import Event, RegionUtility

logger = logging.getLogger(__name__)

_INF = np.inf


@dataclass(frozen=True)
class StructuralChoice:
    """
    Events allowed to consume from / produce on the region (``None`` = all).
    """

    consumers: Optional[FrozenSet[int]] = None
    producers: Optional[FrozenSet[int]] = None

    def allows_consumer(self, index: int) -> bool:
        return self.consumers is None or index in self.consumers


class RegionSearch:
    """
    Build and solve the integer programs of one transition system.

    :param utility: Region utility of the transition system.
    :type utility: RegionUtility
    :param properties: Constraints every returned region satisfies.
    :type properties: PNProperties
    :param cancel: Optional object with ``is_set()``; checked before every
        solver call.
    :raises MissingLocationError: If ``distributed`` is requested for a
        transition system without location labels.

    The base constraint system is built once; a search only appends the
    row of its separation problem. Apart from the :attr:`solver_calls`
    counter, instances are read-only after construction and may be shared
    between threads.
    """

    def __init__(
        self,
        utility: RegionUtility,
        properties: PNProperties,
        *,
        cancel=None,
    ) -> None:
        if properties.distributed and not utility.has_locations:
            raise MissingLocationError(
                "Property 'distributed' requires location labels on all events"
            )
        self.utility = utility
        self.properties = properties
        self.cancel = cancel
        self.solver_calls = 0
        self._calls_lock = threading.Lock()

        n = utility.number_of_events
        self._n = n
        self._pure = properties.pure
        if self._pure:
            self._m0 = n
            self._nvars = 2 * n + 1
        else:
            self._m0 = 2 * n
            self._nvars = 2 * n + 1
        self._z: Optional[int] = None
        if properties.kmarking is not None:
            self._z = self._nvars
            self._nvars += 1

        self._markings = self._marking_rows()
        self._base = self._base_constraints()
        self._lb, self._ub = self._base_bounds()
        self._cost = self._objective()
        self._integrality = np.ones(self._nvars)
        self._choices = list(self._structural_choices())

    # ------------------------------------------------------------------
    # Program construction
    # ------------------------------------------------------------------
    def _weight_rows(self, vectors: np.ndarray) -> np.ndarray:
        """Rows ``r`` with ``r . x == v . w`` for each event vector ``v``."""
        n = self._n
        rows = np.zeros((vectors.shape[0], self._nvars))
        if self._pure:
            rows[:, :n] = vectors
        else:
            rows[:, :n] = -vectors
            rows[:, n : 2 * n] = vectors
        return rows

    def _marking_rows(self) -> np.ndarray:
        rows = self._weight_rows(self.utility.parikh_matrix)
        rows[:, self._m0] = 1
        return rows

    def _base_constraints(self) -> List[LinearConstraint]:
        u = self.utility
        n = self._n
        props = self.properties
        constraints: List[LinearConstraint] = []

        upper = _INF if props.kbounded is None else props.kbounded
        constraints.append(LinearConstraint(self._markings, 0, upper))

        chords = u.chord_vectors
        if chords.shape[0]:
            constraints.append(LinearConstraint(self._weight_rows(chords), 0, 0))

        if not self._pure:
            arcs = u.reachable_arcs
            if arcs:
                rows = np.zeros((len(arcs), self._nvars))
                for r, arc in enumerate(arcs):
                    rows[r] = self._markings[u.state_index(arc.source)]
                    rows[r, u.get_event_index(arc.label)] -= 1
                constraints.append(LinearConstraint(rows, 0, _INF))
        elif n:
            rows = np.zeros((2 * n, self._nvars))
            for i in range(n):
                rows[2 * i, n + 1 + i] = 1
                rows[2 * i, i] = -1
                rows[2 * i + 1, n + 1 + i] = 1
                rows[2 * i + 1, i] = 1
            constraints.append(LinearConstraint(rows, 0, _INF))

        if self._z is not None:
            row = np.zeros((1, self._nvars))
            row[0, self._m0] = 1
            row[0, self._z] = -props.kmarking
            constraints.append(LinearConstraint(row, 0, 0))
        return constraints

    def _base_bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        n = self._n
        lb = np.zeros(self._nvars)
        ub = np.full(self._nvars, _INF)
        if self._pure:
            lb[:n] = -1 if self.properties.plain else -_INF
            if self.properties.plain:
                ub[:n] = 1
        elif self.properties.plain:
            ub[: 2 * n] = 1
        return lb, ub

    def _objective(self) -> np.ndarray:
        n = self._n
        c = np.zeros(self._nvars)
        if self._pure:
            c[self._m0] = 1
            c[n + 1 : 2 * n + 1] = 1
        else:
            c[: 2 * n + 1] = 1
        return c

    def _structural_choices(self) -> Iterator[StructuralChoice]:
        props = self.properties
        u = self.utility
        n = self._n
        singles = [frozenset()] + [frozenset({i}) for i in range(n)]

        if props.single_consumer:
            consumer_options: List[Optional[FrozenSet[int]]] = list(singles)
        elif props.distributed:
            consumer_options = [
                frozenset(i for i in range(n) if u.get_location(i) == loc) for loc in u.locations
            ]
        else:
            consumer_options = [None]

        producer_options: List[Optional[FrozenSet[int]]] = list(singles) if props.tnet else [None]

        for consumers, producers in product(consumer_options, producer_options):
            yield StructuralChoice(consumers, producers)

    @property
    def choices(self) -> List[StructuralChoice]:
        return list(self._choices)

    def _bounds_for(self, choice: StructuralChoice) -> Bounds:
        n = self._n
        lb = self._lb.copy()
        ub = self._ub.copy()
        for i in range(n):
            if choice.consumers is not None and i not in choice.consumers:
                if self._pure:
                    lb[i] = max(lb[i], 0)
                else:
                    ub[i] = 0
            if choice.producers is not None and i not in choice.producers:
                if self._pure:
                    ub[i] = min(ub[i], 0)
                else:
                    ub[n + i] = 0
        return Bounds(lb, ub)

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------
    def _check_cancelled(self) -> None:
        if self.cancel is not None and self.cancel.is_set():
            raise SynthesisCancelled("Synthesis cancelled during region search")

    def _solve(self, choice: StructuralChoice, row: np.ndarray, lb: float, ub: float) -> Optional[Region]:
        self._check_cancelled()
        with self._calls_lock:
            self.solver_calls += 1
        constraints = self._base + [LinearConstraint(row.reshape(1, -1), lb, ub)]
        res = milp(
            self._cost,
            integrality=self._integrality,
            bounds=self._bounds_for(choice),
            constraints=constraints,
        )
        if res.status == 2:
            return None
        if res.status != 0 or res.x is None:
            raise SolverError(f"MILP solver failed (status {res.status}): {res.message}")
        return self._decode(res.x)

    def _decode(self, x: np.ndarray) -> Region:
        n = self._n
        values = [int(v) for v in np.rint(x)]
        m0 = values[self._m0]
        if self._pure:
            return Region.from_weights(self.utility, values[:n], m0)
        return Region(self.utility, values[:n], values[n : 2 * n], m0)

    def _accept(self, region: Region, solved: bool, what: str) -> Region:
        region.check_axiom()
        if not region.satisfies(self.properties):
            raise RegionInvariantError(f"Region {region!r} for {what} violates {self.properties}")
        if not solved:
            raise RegionInvariantError(f"Region {region!r} does not solve {what}")
        return region

    def find_ssp_region(self, s: Hashable, t: Hashable) -> Optional[Region]:
        """
        Search a region with ``m(s) != m(t)``.

        Both directions (``m(s) > m(t)`` first) are tried for every
        structural choice in order; the first solution is returned.

        :returns: A valid region satisfying the properties, or ``None`` if
            no such region exists.
        """
        u = self.utility
        row = self._markings[u.state_index(s)] - self._markings[u.state_index(t)]
        for choice in self._choices:
            for lb, ub in ((1, _INF), (-_INF, -1)):
                region = self._solve(choice, row, lb, ub)
                if region is not None:
                    return self._accept(region, region.solves_ssp(s, t), f"SSP({s!r}, {t!r})")
        return None

    def find_essp_region(self, event: Event, state: Hashable) -> Optional[Region]:
        """
        Search a region with ``m(state) < b(event)``.

        :returns: A valid region satisfying the properties, or ``None`` if
            no such region exists.
        """
        u = self.utility
        idx = u.get_event_index(event)
        row = -self._markings[u.state_index(state)].copy()
        if self._pure:
            row[idx] -= 1
        else:
            row[idx] += 1
        for choice in self._choices:
            if not choice.allows_consumer(idx):
                continue
            region = self._solve(choice, row, 1, _INF)
            if region is not None:
                label = u.get_event(idx)
                return self._accept(
                    region, region.solves_essp(idx, state), f"ESSP({label!r}, {state!r})"
                )
        return None
