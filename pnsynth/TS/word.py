from __future__ import annotations

import re
from typing import Dict, Hashable, Iterable, Tuple

from .lts import TransitionSystem

__all__ = ["WordTS", "make_ts", "parse_word"]


class WordTS(TransitionSystem):
    """
    Linear transition system of a finite word.

    State ``s0`` is initial and ``s{i+1}`` is reached from ``s{i}`` by the
    ``i``-th letter. The position of every state inside the word is kept in
    :attr:`positions`, so diagnostics can be mapped back onto the word.

    :param word: Sequence of event labels.
    :type word: Iterable[str]
    """

    def __init__(self, word: Iterable[str]) -> None:
        super().__init__(name="word")
        self.word: Tuple[str, ...] = tuple(str(x) for x in word)
        self.positions: Dict[Hashable, int] = {}

        state = self.create_state("s0")
        self.positions[state] = 0
        self.initial_state = state
        for index, label in enumerate(self.word, start=1):
            nxt = self.create_state(f"s{index}")
            self.positions[nxt] = index
            self.create_arc(state, nxt, label)
            state = nxt

    def state_at(self, index: int) -> Hashable:
        """State reached after the first ``index`` letters."""
        if not 0 <= index <= len(self.word):
            raise IndexError(f"Position {index} outside word of length {len(self.word)}")
        return f"s{index}"


def make_ts(word: Iterable[str]) -> WordTS:
    """
    Convert a word into its linear transition system.

    :param word: Sequence of event labels, e.g. ``["a", "b", "a"]``.
    :returns: The linear transition system with its position mapping.
    :rtype: WordTS
    """
    return WordTS(word)


def parse_word(text: str) -> Tuple[str, ...]:
    """
    Split a textual word on whitespace and/or commas.

    ``"a b a"``, ``"a,b,a"`` and ``"a, b, a"`` all give ``("a", "b", "a")``.
    """
    return tuple(tok for tok in re.split(r"[\s,]+", text.strip()) if tok)
