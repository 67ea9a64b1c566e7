"""
Structural properties requested from a synthesised net.

A :class:`PNProperties` instance is immutable configuration: it names the
constraints every accepted region (and hence every place of the net) must
satisfy. It carries no search logic; the region search reads it to shape
its integer program and :meth:`PNProperties.check_region` evaluates a
finished region against it.

Supported constraints
---------------------
* ``pure``: no event both consumes from and produces on a place.
* ``plain``: all arc weights are at most 1.
* ``k-bounded`` (``safe`` = 1-bounded): every reachable marking of every
  place is at most ``k``.
* ``k-marking``: the initial marking of every place is a multiple of ``k``.
* ``t-net``: every place has at most one consuming and one producing event.
* ``output-nonbranching``: every place has at most one consuming event.
* ``distributed``: all consumers of a place share one location.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from math import gcd
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from .exceptions import PropertyError

if TYPE_CHECKING:  # pragma: no cover
    from .region import AbstractRegion

PURE = "pure"
PLAIN = "plain"
SAFE = "safe"
KBOUNDED = "k-bounded"
KMARKING = "k-marking"
TNET = "t-net"
OUTPUT_NONBRANCHING = "output-nonbranching"
DISTRIBUTED = "distributed"

_FLAG_FIELDS = {
    PURE: "pure",
    PLAIN: "plain",
    TNET: "tnet",
    OUTPUT_NONBRANCHING: "output_nonbranching",
    DISTRIBUTED: "distributed",
}

_ALIASES = {
    "tnet": TNET,
    "on": OUTPUT_NONBRANCHING,
    "output_nonbranching": OUTPUT_NONBRANCHING,
    "kbounded": KBOUNDED,
    "k_bounded": KBOUNDED,
    "kmarking": KMARKING,
    "k_marking": KMARKING,
}


def _check_k(name: str, k: Optional[int]) -> Optional[int]:
    if k is None:
        return None
    if isinstance(k, bool) or int(k) != k or k < 1:
        raise PropertyError(f"{name} needs a positive integer, got {k!r}")
    return int(k)


@dataclass(frozen=True)
class PNProperties:
    """
    Immutable set of structural constraints.

    :param flags: Names of boolean constraints (``"pure"``, ``"plain"``,
        ``"t-net"``, ``"output-nonbranching"``, ``"distributed"``, ``"safe"``).
    :param kbounded: Optional marking bound ``k >= 1``.
    :param kmarking: Optional initial-marking modulus ``k >= 1``.
    :raises PropertyError: For unknown flags or bounds below 1.

    .. code-block:: python

        props = PNProperties("pure", kbounded=2)
        props.requires("pure")        # True
        props & PNProperties.safe()   # pure, 1-bounded
    """

    pure: bool = False
    plain: bool = False
    tnet: bool = False
    output_nonbranching: bool = False
    distributed: bool = False
    kbounded: Optional[int] = None
    kmarking: Optional[int] = None

    def __init__(
        self,
        *flags: str,
        kbounded: Optional[int] = None,
        kmarking: Optional[int] = None,
    ) -> None:
        values = {name: False for name in _FLAG_FIELDS.values()}
        kbounded = _check_k(KBOUNDED, kbounded)
        kmarking = _check_k(KMARKING, kmarking)
        for flag in flags:
            key = _ALIASES.get(flag.lower(), flag.lower())
            if key == SAFE:
                kbounded = 1 if kbounded is None else min(kbounded, 1)
            elif key in _FLAG_FIELDS:
                values[_FLAG_FIELDS[key]] = True
            else:
                raise PropertyError(f"Unknown net property {flag!r}")
        for name, value in values.items():
            object.__setattr__(self, name, value)
        object.__setattr__(self, "kbounded", kbounded)
        object.__setattr__(self, "kmarking", kmarking)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def _build(cls, **values) -> "PNProperties":
        obj = cls(kbounded=values.pop("kbounded"), kmarking=values.pop("kmarking"))
        for name, value in values.items():
            object.__setattr__(obj, name, bool(value))
        return obj

    @classmethod
    def bounded(cls, k: int) -> "PNProperties":
        """Only ``k``-boundedness."""
        return cls(kbounded=k)

    @classmethod
    def safe(cls) -> "PNProperties":
        return cls(kbounded=1)

    @classmethod
    def marking(cls, k: int) -> "PNProperties":
        """Only ``k``-marking."""
        return cls(kmarking=k)

    @classmethod
    def from_strings(cls, items: Iterable[str]) -> "PNProperties":
        """
        Parse textual flags such as ``"pure"``, ``"k-bounded=3"`` or
        ``"k-marking:2"``. ``"none"`` and empty strings are ignored.

        :raises PropertyError: For unknown flags or malformed arguments.
        """
        result = cls()
        for raw in items:
            for token in (t for t in re.split(r"[\s,]+", raw.strip()) if t):
                result = result & cls._parse_token(token)
        return result

    @classmethod
    def _parse_token(cls, token: str) -> "PNProperties":
        name, _, arg = token.partition("=") if "=" in token else token.partition(":")
        key = _ALIASES.get(name.lower(), name.lower())
        if key == "none":
            return cls()
        if key in (KBOUNDED, KMARKING):
            if not arg:
                raise PropertyError(f"Property {name!r} needs an integer argument")
            try:
                k = int(arg)
            except ValueError:
                raise PropertyError(f"Invalid argument {arg!r} for {name!r}") from None
            return cls(kbounded=k) if key == KBOUNDED else cls(kmarking=k)
        if arg:
            raise PropertyError(f"Property {name!r} takes no argument")
        return cls(key)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def requires(self, flag: str) -> bool:
        """
        ``True`` if the constraint named ``flag`` is part of this configuration.

        :raises PropertyError: For unknown names.
        """
        key = _ALIASES.get(flag.lower(), flag.lower())
        if key in _FLAG_FIELDS:
            return getattr(self, _FLAG_FIELDS[key])
        if key == SAFE:
            return self.kbounded == 1
        if key == KBOUNDED:
            return self.kbounded is not None
        if key == KMARKING:
            return self.kmarking is not None
        raise PropertyError(f"Unknown net property {flag!r}")

    @property
    def is_safe(self) -> bool:
        return self.kbounded == 1

    @property
    def single_consumer(self) -> bool:
        """Places may have at most one consuming event."""
        return self.tnet or self.output_nonbranching

    @property
    def flags(self) -> List[str]:
        names = [flag for flag, attr in _FLAG_FIELDS.items() if getattr(self, attr)]
        if self.kbounded is not None:
            names.append(SAFE if self.kbounded == 1 else f"{KBOUNDED}={self.kbounded}")
        if self.kmarking is not None:
            names.append(f"{KMARKING}={self.kmarking}")
        return names

    # ------------------------------------------------------------------
    # Combination
    # ------------------------------------------------------------------
    def combine(self, other: "PNProperties") -> "PNProperties":
        """
        Logical AND of two configurations.

        Boolean constraints are united, the tighter marking bound wins and
        the initial-marking modulus becomes the least common multiple.
        """
        if not isinstance(other, PNProperties):
            return NotImplemented
        bounds = [k for k in (self.kbounded, other.kbounded) if k is not None]
        moduli = [k for k in (self.kmarking, other.kmarking) if k is not None]
        kmarking = None
        if moduli:
            kmarking = moduli[0]
            for k in moduli[1:]:
                kmarking = kmarking * k // gcd(kmarking, k)
        return self._build(
            pure=self.pure or other.pure,
            plain=self.plain or other.plain,
            tnet=self.tnet or other.tnet,
            output_nonbranching=self.output_nonbranching or other.output_nonbranching,
            distributed=self.distributed or other.distributed,
            kbounded=min(bounds) if bounds else None,
            kmarking=kmarking,
        )

    __and__ = combine

    def __str__(self) -> str:
        return "[" + ", ".join(self.flags) + "]"

    # ------------------------------------------------------------------
    # Region evaluation
    # ------------------------------------------------------------------
    def check_region(self, region: Union["AbstractRegion", object]) -> bool:
        """
        Evaluate every constraint against a region.

        :param region: Any :class:`~pnsynth.Synthesis.region.AbstractRegion`.
        :returns: ``True`` if the region satisfies all constraints.
        """
        utility = region.utility
        n = utility.number_of_events
        back = [region.get_backward_weight(i) for i in range(n)]
        fwd = [region.get_forward_weight(i) for i in range(n)]

        if self.pure and any(b and f for b, f in zip(back, fwd)):
            return False
        if self.plain and any(w > 1 for w in back + fwd):
            return False
        if self.kmarking is not None and region.normal_marking % self.kmarking:
            return False
        consumers = [i for i, b in enumerate(back) if b > 0]
        producers = [i for i, f in enumerate(fwd) if f > 0]
        if self.single_consumer and len(consumers) > 1:
            return False
        if self.tnet and len(producers) > 1:
            return False
        if self.distributed and len({utility.get_location(i) for i in consumers}) > 1:
            return False
        if self.kbounded is not None and any(m > self.kbounded for m in region.markings()):
            return False
        return True
