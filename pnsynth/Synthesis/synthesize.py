"""
Entry point of region-based Petri net synthesis.

:class:`SynthesizePN` owns one run of the separation engine: it validates
the configuration, runs the engine to completion and keeps the accepted
regions together with the failed separation problems. The net itself is
built on demand by :func:`~pnsynth.Synthesis.net_builder.synthesize_petri_net`.

.. code-block:: python

    from pnsynth.Synthesis import PNProperties, SynthesizePN

    synth = SynthesizePN(ts, PNProperties("pure"))
    if synth.was_successfully_separated():
        pn = synth.synthesize_petri_net()
    else:
        print(synth.get_failed_state_separation_problems())
        print(synth.get_failed_event_state_separation_problems())
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Hashable, Iterable, List, Optional, Tuple, Union

from ..Petri.net import PetriNet
from ..TS.lts import TransitionSystem
from ..TS.word import make_ts
from .net_builder import synthesize_petri_net
from .properties import PNProperties
from .region import Region
from .region_utility import RegionUtility
from .separation import SeparationEngine, SeparationResult

logger = logging.getLogger(__name__)


class SynthesizePN:
    """
    Synthesise a Petri net whose reachability graph is isomorphic to a
    transition system, under structural constraints.

    The synthesis runs in the constructor.

    :param ts: Transition system, or a prepared :class:`RegionUtility`.
    :type ts: TransitionSystem or RegionUtility
    :param properties: Constraints on the net; no constraints by default.
    :type properties: PNProperties or None
    :param cancel: Optional cancellation signal (object with ``is_set()``).
    :param workers: Number of search threads (``1`` = sequential model).
    :type workers: int
    :raises InvalidTransitionSystemError: If the TS has no initial state.
    :raises MissingLocationError: If ``distributed`` is requested for a TS
        without event locations.
    :raises SynthesisCancelled: If ``cancel`` is set during the run.
    """

    def __init__(
        self,
        ts: Union[TransitionSystem, RegionUtility],
        properties: Optional[PNProperties] = None,
        *,
        cancel=None,
        workers: int = 1,
    ) -> None:
        self.utility = ts if isinstance(ts, RegionUtility) else RegionUtility(ts)
        self.properties = properties if properties is not None else PNProperties()
        engine = SeparationEngine(self.utility, self.properties, cancel=cancel, workers=workers)
        self._result: SeparationResult = engine.run()

    @classmethod
    def from_word(
        cls,
        word: Iterable[str],
        properties: Optional[PNProperties] = None,
        **kwargs,
    ) -> "SynthesizePN":
        """Synthesise from the linear transition system of ``word``."""
        return cls(make_ts(word), properties, **kwargs)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    @property
    def ts(self) -> TransitionSystem:
        return self.utility.ts

    @property
    def result(self) -> SeparationResult:
        return self._result

    def was_successfully_separated(self) -> bool:
        """``True`` if every separation problem was solved."""
        return self._result.successful

    def get_separating_regions(self) -> List[Region]:
        """Accepted regions in the order they entered the basis."""
        return list(self._result.regions)

    def get_failed_state_separation_problems(self) -> List[FrozenSet[Hashable]]:
        """Pairs of states no admissible region distinguishes."""
        return list(self._result.failed_ssp)

    def get_failed_event_state_separation_problems(self) -> List[Tuple[str, Hashable]]:
        """``(event, state)`` pairs where the event could not be kept disabled."""
        return list(self._result.failed_essp)

    def get_unseparated_state_classes(self) -> List[FrozenSet[Hashable]]:
        return self._result.unseparated_state_classes()

    def synthesize_petri_net(self) -> PetriNet:
        """
        Build the net of the accepted regions.

        Allowed even if separation failed; the net then does not reproduce
        the transition system.
        """
        if not self.was_successfully_separated():
            logger.warning("Building a net from an incompletely separated transition system")
        return synthesize_petri_net(self._result.regions, self.utility.event_list)

    def summary(self) -> str:
        """Short multi-line description of the run."""
        lines = [
            f"properties: {self.properties}",
            f"success: {self.was_successfully_separated()}",
            f"regions: {len(self._result.regions)}",
        ]
        for r in self._result.regions:
            lines.append(f"  {r!r}")
        if self._result.failed_ssp:
            classes = ", ".join(
                "[" + ", ".join(sorted(map(str, c))) + "]"
                for c in self.get_unseparated_state_classes()
            )
            lines.append(f"failed state separation: {classes}")
        if self._result.failed_essp:
            pairs = ", ".join(f"{e}@{s}" for e, s in self._result.failed_essp)
            lines.append(f"failed event/state separation: {pairs}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"SynthesizePN(success={self.was_successfully_separated()}, "
            f"regions={len(self._result.regions)}, failed_ssp={len(self._result.failed_ssp)}, "
            f"failed_essp={len(self._result.failed_essp)})"
        )
