from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set

from ..TS.word import WordTS, make_ts
from .properties import PNProperties
from .synthesize import SynthesizePN

logger = logging.getLogger(__name__)


def format_separation_failures(word: Iterable[str], failures: Mapping[int, Set[str]]) -> str:
    """
    Render failed event/state separation points of a word.

    Letters are joined with ``,``; the sorted events that could not be kept
    disabled at position ``i`` are put in brackets before the ``i``-th
    letter, and those of the final position after the last letter.

    :param word: The letters.
    :param failures: Position (``0 .. len(word)``) -> failing events.
    :returns: E.g. ``"[a] a,b"`` for ``a`` failing before position 0.
    """
    word = list(word)
    tokens: List[str] = []
    for index, letter in enumerate(word):
        events = failures.get(index)
        prefix = "[" + ",".join(sorted(events)) + "] " if events else ""
        tokens.append(prefix + letter)
    text = ",".join(tokens)
    tail = failures.get(len(word))
    if tail:
        text = (text + " " if text else "") + "[" + ",".join(sorted(tail)) + "]"
    return text


class WordSynthesis:
    """
    Petri net synthesis from a finite word.

    :param word: Sequence of labels.
    :param properties: Constraints on the net.
    :param kwargs: Passed on to :class:`SynthesizePN` (``cancel``, ``workers``).

    .. code-block:: python

        ws = WordSynthesis("a b a".split(), PNProperties("pure"))
        ws.synthesis.was_successfully_separated()
        ws.separation_failure_points()   # None on success
    """

    def __init__(
        self,
        word: Iterable[str],
        properties: Optional[PNProperties] = None,
        **kwargs,
    ) -> None:
        self.ts: WordTS = make_ts(word)
        self.word = self.ts.word
        self.synthesis = SynthesizePN(self.ts, properties, **kwargs)
        if self.synthesis.get_failed_state_separation_problems():
            # only possible when a marking bound is requested
            logger.warning(
                "State separation failed for word %s under %s",
                " ".join(self.word),
                self.synthesis.properties,
            )

    def failures_by_position(self) -> Dict[int, Set[str]]:
        """Failed event/state separation problems keyed by word position."""
        result: Dict[int, Set[str]] = {}
        for event, state in self.synthesis.get_failed_event_state_separation_problems():
            result.setdefault(self.ts.positions[state], set()).add(event)
        return result

    def separation_failure_points(self) -> Optional[str]:
        """Rendered failure points, ``None`` if the word was fully separated."""
        if self.synthesis.was_successfully_separated():
            return None
        return format_separation_failures(self.word, self.failures_by_position())
