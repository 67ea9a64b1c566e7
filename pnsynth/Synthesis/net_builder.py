from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..Petri.net import PetriNet
from .region import AbstractRegion


def synthesize_petri_net(
    regions: Iterable[AbstractRegion],
    events: Optional[Sequence[str]] = None,
) -> PetriNet:
    """
    Turn a set of regions into a Petri net.

    One place ``p{i}`` per region (in iteration order) with the region's
    normal marking, one transition per event, an arc ``p{i} -> e`` weighted
    with the backward weight and an arc ``e -> p{i}`` weighted with the
    forward weight whenever these are non-zero.

    :param regions: Accepted regions, all of the same transition system.
    :type regions: Iterable[AbstractRegion]
    :param events: Transition labels; taken from the first region's utility
        when omitted. Without regions and events the net is empty.
    :type events: Sequence[str] or None
    :returns: The synthesised net.
    :rtype: PetriNet

    .. code-block:: python

        pn = synthesize_petri_net(synth.get_separating_regions())
        pn.places, pn.transitions
    """
    regions = list(regions)
    if events is None:
        events = regions[0].utility.event_list if regions else []

    pn = PetriNet()
    for e in events:
        pn.create_transition(e)

    for i, region in enumerate(regions):
        name = f"p{i}"
        while name in pn.graph:
            name = "_" + name
        place = pn.create_place(name, initial=region.normal_marking)
        for e in events:
            back = region.get_backward_weight(e)
            fwd = region.get_forward_weight(e)
            if back:
                pn.create_flow(place, e, back)
            if fwd:
                pn.create_flow(e, place, fwd)
    return pn
