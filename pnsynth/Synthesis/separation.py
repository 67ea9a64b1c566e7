"""
Separation engine: grow a region basis that solves every separation problem.

Problems
--------
* ``SSP(s, t)`` for every unordered pair of reachable states, solved by a
  region with ``m(s) != m(t)``.
* ``ESSP(e, s)`` for every event ``e`` not enabled at reachable state ``s``,
  solved by a region with ``m(s) < b(e)``.

Problems are enumerated deterministically (state pairs in canonical state
order, then states x event index). Each problem is first checked against
the accumulated basis; only if no accepted region solves it is a new region
searched (:class:`~pnsynth.Synthesis.region_search.RegionSearch`). A problem
without any admissible region is recorded as a failure and the run
continues.

With ``workers > 1`` problems are searched concurrently. Workers only
*report* ``(problem, region)`` results; the engine thread owns the basis and
re-checks every report against the current basis before inserting it. The
search for a new region does not depend on the basis, so solved/failed
classifications equal the sequential run; only the choice of witnessing
regions may differ.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import combinations
from typing import FrozenSet, Hashable, Iterator, List, Optional, Tuple, Union

import networkx as nx
import numpy as np

from .exceptions import SynthesisCancelled
from .properties import PNProperties
from .region import AbstractRegion, Region
from .region_search import RegionSearch
from .region_utility import RegionUtility

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateSeparationProblem:
    """Distinguish two reachable states."""

    s: Hashable
    t: Hashable

    def __str__(self) -> str:
        return f"SSP({self.s}, {self.t})"


@dataclass(frozen=True)
class EventStateSeparationProblem:
    """Keep ``event`` disabled at ``state``."""

    event: str
    state: Hashable

    def __str__(self) -> str:
        return f"ESSP({self.event}, {self.state})"


Problem = Union[StateSeparationProblem, EventStateSeparationProblem]


def enumerate_problems(utility: RegionUtility) -> Iterator[Problem]:
    """
    All separation problems of a transition system in canonical order.

    SSPs come first (pairs of reachable states in canonical order), then
    ESSPs (per state, per event index, disabled events only).
    """
    states = utility.states
    for s, t in combinations(states, 2):
        yield StateSeparationProblem(s, t)
    for s in states:
        for event in utility.event_list:
            if not utility.is_enabled(s, event):
                yield EventStateSeparationProblem(event, s)


@dataclass
class SeparationResult:
    """
    Outcome of one separation run.

    :ivar regions: Accepted regions in insertion order, without duplicates.
    :ivar failed_ssp: Unseparable state pairs.
    :ivar failed_essp: ``(event, state)`` pairs that could not be kept disabled.
    :ivar problems: Number of problems posed.
    :ivar searches: Number of problems that needed a region search.
    """

    regions: List[Region] = field(default_factory=list)
    failed_ssp: List[FrozenSet[Hashable]] = field(default_factory=list)
    failed_essp: List[Tuple[str, Hashable]] = field(default_factory=list)
    problems: int = 0
    searches: int = 0

    @property
    def successful(self) -> bool:
        return not self.failed_ssp and not self.failed_essp

    @property
    def solved(self) -> int:
        """Number of problems solved by the final basis."""
        return self.problems - len(self.failed_ssp) - len(self.failed_essp)

    def unseparated_state_classes(self) -> List[FrozenSet[Hashable]]:
        """
        Classes of mutually unseparated states.

        Unseparability is an equivalence, so the classes are the connected
        components of the failed-SSP relation.
        """
        G = nx.Graph()
        for pair in self.failed_ssp:
            G.add_nodes_from(pair)
            G.add_edge(*pair)
        return [frozenset(c) for c in nx.connected_components(G)]


class _Basis:
    """
    Region basis with cached marking vectors.

    All mutation happens under :attr:`lock`; readers take a snapshot.
    """

    def __init__(self, utility: RegionUtility) -> None:
        self.utility = utility
        self.lock = threading.Lock()
        self._regions: List[Region] = []
        self._known: set = set()
        self._markings: List[np.ndarray] = []

    def snapshot(self) -> Tuple[List[Region], List[np.ndarray]]:
        with self.lock:
            return list(self._regions), list(self._markings)

    def solves(self, problem: Problem, snapshot=None) -> Optional[AbstractRegion]:
        regions, markings = snapshot if snapshot is not None else self.snapshot()
        u = self.utility
        if isinstance(problem, StateSeparationProblem):
            i, j = u.state_index(problem.s), u.state_index(problem.t)
            for region, m in zip(regions, markings):
                if m[i] != m[j]:
                    return region
        else:
            i = u.state_index(problem.state)
            for region, m in zip(regions, markings):
                if m[i] < region.get_backward_weight(problem.event):
                    return region
        return None

    def add_if_unsolved(self, problem: Problem, region: Region) -> bool:
        """Insert ``region`` unless the basis already solves ``problem``."""
        with self.lock:
            if self.solves(problem, (self._regions, self._markings)) is not None:
                return False
            if region in self._known:
                return False
            self._known.add(region)
            self._regions.append(region)
            self._markings.append(region.markings())
            return True

    @property
    def regions(self) -> List[Region]:
        with self.lock:
            return list(self._regions)


class SeparationEngine:
    """
    Solve all separation problems of a transition system.

    :param utility: Region utility of the transition system.
    :type utility: RegionUtility
    :param properties: Constraints on every accepted region.
    :type properties: PNProperties
    :param cancel: Optional cancellation signal (``threading.Event``-like).
    :param workers: Number of search threads; ``1`` is the sequential
        reference model.

    .. code-block:: python

        engine = SeparationEngine(RegionUtility(ts), PNProperties("pure"))
        result = engine.run()
        result.successful, result.regions
    """

    def __init__(
        self,
        utility: RegionUtility,
        properties: Optional[PNProperties] = None,
        *,
        cancel=None,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.utility = utility
        self.properties = properties if properties is not None else PNProperties()
        self.cancel = cancel
        self.workers = workers
        self.search = RegionSearch(utility, self.properties, cancel=cancel)

    def _check_cancelled(self) -> None:
        if self.cancel is not None and self.cancel.is_set():
            raise SynthesisCancelled("Synthesis cancelled")

    def _find(self, problem: Problem) -> Optional[Region]:
        if isinstance(problem, StateSeparationProblem):
            return self.search.find_ssp_region(problem.s, problem.t)
        return self.search.find_essp_region(problem.event, problem.state)

    @staticmethod
    def _record_failure(result: SeparationResult, problem: Problem) -> None:
        if isinstance(problem, StateSeparationProblem):
            result.failed_ssp.append(frozenset((problem.s, problem.t)))
        else:
            result.failed_essp.append((problem.event, problem.state))
        logger.debug("%s: no admissible region", problem)

    def run(self) -> SeparationResult:
        """
        Run the engine to completion.

        :returns: The accepted regions and failure lists.
        :raises SynthesisCancelled: If the cancellation signal is set; no
            partial result is returned.
        """
        problems = list(enumerate_problems(self.utility))
        logger.info(
            "Separating %d state(s), %d event(s): %d problem(s), properties %s",
            len(self.utility.states),
            self.utility.number_of_events,
            len(problems),
            self.properties,
        )
        if self.workers == 1:
            result = self._run_sequential(problems)
        else:
            result = self._run_parallel(problems)
        logger.info(
            "Separation finished: %d region(s), %d failed SSP, %d failed ESSP, %d solver call(s)",
            len(result.regions),
            len(result.failed_ssp),
            len(result.failed_essp),
            self.search.solver_calls,
        )
        return result

    def _run_sequential(self, problems: List[Problem]) -> SeparationResult:
        basis = _Basis(self.utility)
        result = SeparationResult(problems=len(problems))
        for problem in problems:
            self._check_cancelled()
            if basis.solves(problem) is not None:
                continue
            result.searches += 1
            region = self._find(problem)
            if region is None:
                self._record_failure(result, problem)
                continue
            basis.add_if_unsolved(problem, region)
            logger.debug("%s solved by %r", problem, region)
        result.regions = basis.regions
        return result

    def _run_parallel(self, problems: List[Problem]) -> SeparationResult:
        basis = _Basis(self.utility)
        result = SeparationResult(problems=len(problems))
        searched = threading.Lock()

        def attempt(problem: Problem) -> Tuple[Problem, bool, Optional[Region]]:
            self._check_cancelled()
            if basis.solves(problem) is not None:
                return problem, False, None
            with searched:
                result.searches += 1
            return problem, True, self._find(problem)

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(attempt, p) for p in problems]
            try:
                for future in futures:
                    problem, was_searched, region = future.result()
                    if not was_searched:
                        continue
                    if region is None:
                        self._record_failure(result, problem)
                    elif basis.add_if_unsolved(problem, region):
                        logger.debug("%s solved by %r", problem, region)
            except BaseException:
                for future in futures:
                    future.cancel()
                raise
        result.regions = basis.regions
        return result
