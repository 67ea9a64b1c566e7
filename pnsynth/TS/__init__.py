from .lts import Arc, TransitionSystem
from .word import WordTS, make_ts, parse_word
from .isomorphism import is_isomorphic, reachable_states

__all__ = [
    "Arc",
    "TransitionSystem",
    "WordTS",
    "make_ts",
    "parse_word",
    "is_isomorphic",
    "reachable_states",
]
