"""
Command line front end.

.. code-block:: bash

    pnsynth word_synthesize "b b a b b" pure plain
    pnsynth synthesize ts.txt safe --workers 4
    python -m pnsynth.cli word_synthesize "a,b,a" k-marking=2

A transition-system file holds one arc ``source label target [location]``
per line and exactly one ``initial <state>`` line; blank lines and text
after ``#`` are ignored.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .IO.debug import setup_logging
from .Petri.net import PetriNet
from .Synthesis.exceptions import ConfigurationError, InvalidTransitionSystemError
from .Synthesis.properties import PNProperties
from .Synthesis.synthesize import SynthesizePN
from .Synthesis.word import WordSynthesis
from .TS.lts import TransitionSystem
from .TS.word import parse_word

logger = logging.getLogger(__name__)


def read_transition_system(path: Path) -> TransitionSystem:
    """
    Read a transition system from the line format described above.

    :raises ValueError: On malformed lines or a missing/duplicate
        ``initial`` line.
    """
    ts = TransitionSystem(name=Path(path).stem)
    initial = None
    for lineno, raw in enumerate(Path(path).read_text().splitlines(), start=1):
        tokens = raw.split("#", 1)[0].split()
        if not tokens:
            continue
        if tokens[0] == "initial":
            if len(tokens) != 2:
                raise ValueError(f"{path}:{lineno}: expected 'initial <state>'")
            if initial is not None:
                raise ValueError(f"{path}:{lineno}: initial state given twice")
            initial = tokens[1]
            if initial not in ts:
                ts.create_state(initial)
            continue
        if len(tokens) not in (3, 4):
            raise ValueError(f"{path}:{lineno}: expected 'source label target [location]'")
        source, label, target = tokens[:3]
        for state in (source, target):
            if state not in ts:
                ts.create_state(state)
        ts.create_arc(source, target, label, tokens[3] if len(tokens) == 4 else None)
    if initial is None:
        raise ValueError(f"{path}: no 'initial <state>' line")
    ts.initial_state = initial
    return ts


def render_net(pn: PetriNet) -> str:
    lines = ["transitions: " + ", ".join(map(str, pn.transitions))]
    for p in pn.places:
        consumers = ", ".join(f"{t}*{pn.weight(p, t)}" for t in sorted(pn.postset(p), key=str))
        producers = ", ".join(f"{t}*{pn.weight(t, p)}" for t in sorted(pn.preset(p), key=str))
        lines.append(
            f"place {p} [{pn.initial_marking[p]}]: in ({producers}) out ({consumers})"
        )
    return "\n".join(lines)


def _report(synth: SynthesizePN, out) -> None:
    print(f"success: {synth.was_successfully_separated()}", file=out)
    print(render_net(synth.synthesize_petri_net()), file=out)
    for cls in synth.get_unseparated_state_classes():
        print("unseparated states: " + ", ".join(sorted(map(str, cls))), file=out)
    for event, state in synth.get_failed_event_state_separation_problems():
        print(f"event {event} not separable from state {state}", file=out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pnsynth", description="Region-based Petri net synthesis"
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", default=None, help="Optional log file")
    parser.add_argument(
        "--workers", type=int, default=1, help="Number of search threads (default: 1)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    word = sub.add_parser("word_synthesize", help="Synthesise a net from a word")
    word.add_argument("word", help="Letters separated by spaces and/or commas")
    word.add_argument("properties", nargs="*", help="Net properties, e.g. pure plain k-bounded=2")

    ts = sub.add_parser("synthesize", help="Synthesise a net from a transition-system file")
    ts.add_argument("file", type=Path, help="Transition-system file")
    ts.add_argument("properties", nargs="*", help="Net properties")
    return parser


def main(argv: Optional[Sequence[str]] = None, out=None) -> int:
    """
    Run the command line interface.

    :returns: ``0`` if the input was fully separated, ``1`` if separation
        failed and ``2`` on invalid input.
    """
    out = out if out is not None else sys.stdout
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(args.log_level, args.log_file)
    except ValueError as exc:
        parser.error(str(exc))
    if args.workers < 1:
        parser.error("--workers must be at least 1")

    try:
        properties = PNProperties.from_strings(args.properties)
        if args.command == "word_synthesize":
            letters: List[str] = list(parse_word(args.word))
            ws = WordSynthesis(letters, properties, workers=args.workers)
            synth = ws.synthesis
            _report(synth, out)
            failures = ws.separation_failure_points()
            if failures is not None:
                print(f"failure points: {failures}", file=out)
        else:
            synth = SynthesizePN(
                read_transition_system(args.file), properties, workers=args.workers
            )
            _report(synth, out)
    except (ConfigurationError, InvalidTransitionSystemError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 2
    return 0 if synth.was_successfully_separated() else 1


if __name__ == "__main__":
    sys.exit(main())
