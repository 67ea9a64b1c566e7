"""Small transition systems shared by the synthesis tests."""

from pnsynth.TS.lts import TransitionSystem


def empty_ts() -> TransitionSystem:
    ts = TransitionSystem(name="empty")
    ts.initial_state = ts.create_state("s0")
    return ts


def isolated_states_ts() -> TransitionSystem:
    ts = TransitionSystem(name="isolated")
    s0, _ = ts.create_states("s0", "s1")
    ts.initial_state = s0
    return ts


def single_arc_ts() -> TransitionSystem:
    return TransitionSystem.from_arcs([("s0", "a", "s1")], initial="s0")


def cycle_ts() -> TransitionSystem:
    # s0 -a-> s1 -b-> s0
    return TransitionSystem.from_arcs([("s0", "a", "s1"), ("s1", "b", "s0")], initial="s0")


def located_cycle_ts() -> TransitionSystem:
    ts = TransitionSystem(name="located")
    s0, s1 = ts.create_states("s0", "s1")
    ts.initial_state = s0
    ts.create_arc(s0, s1, "a", location="l1")
    ts.create_arc(s1, s0, "b", location="l2")
    return ts


def nondeterministic_ts() -> TransitionSystem:
    # s1 and s2 are reached from s0 by the same label and lead back by the same label
    return TransitionSystem.from_arcs(
        [("s0", "a", "s1"), ("s0", "a", "s2"), ("s1", "b", "s0"), ("s2", "b", "s0")],
        initial="s0",
    )


def self_loop_ts() -> TransitionSystem:
    # s0 -a-> s0, s0 -b-> s1
    return TransitionSystem.from_arcs([("s0", "a", "s0"), ("s0", "b", "s1")], initial="s0")


def diamond_ts() -> TransitionSystem:
    return TransitionSystem.from_arcs(
        [("s0", "a", "s1"), ("s0", "b", "s2"), ("s1", "b", "s3"), ("s2", "a", "s3")],
        initial="s0",
    )


def region_key(region):
    """Utility-independent identity of a region."""
    return (tuple(region.backward), tuple(region.forward), region.normal_marking)
