"""Radial layout of contacts around the center node.

Every layer is a ring band. A contact's angle and its offset inside the band
come from a hash of its id, so the picture is stable across requests without
storing coordinates. Contacts that need attention are pushed to the outer
edge of the ring they drifted into.
"""

import math
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Tuple

from circles.models.contact import RelationshipLayer
from circles.services.layers import LAYER_CONFIG, LAYER_ORDER, effective_layer

CENTER_RADIUS = 40
RING_GAP = 8

TWO_PI = 2 * math.pi


@dataclass
class LayoutNode:
    contact_id: str
    layer: RelationshipLayer
    needs_attention: bool


@dataclass
class PositionedContact:
    contact_id: str
    x: float
    y: float
    angle: float
    radius: float
    layer: RelationshipLayer
    effective_layer: RelationshipLayer
    needs_attention: bool
    drifting: bool

    def to_dict(self) -> dict:
        return asdict(self)


def _hash_string(key: str) -> int:
    """Java-style string hash wrapped to a signed 32-bit integer."""
    h = 0
    for ch in key:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def hash_to_unit(key: str) -> float:
    """Map a string to a repeatable value in [0, 1)."""
    return abs(math.sin(_hash_string(key)))


def ring_bounds(layer) -> Tuple[float, float]:
    """(inner, outer) radius of a layer's ring band."""
    layer = RelationshipLayer(layer)
    outer = LAYER_CONFIG[layer]["radius"]
    index = LAYER_ORDER.index(layer)
    if index == 0:
        return float(CENTER_RADIUS), float(outer)
    previous = LAYER_ORDER[index - 1]
    return float(LAYER_CONFIG[previous]["radius"] + RING_GAP), float(outer)


def default_angle(contact_id: str) -> float:
    return hash_to_unit(contact_id) * TWO_PI


def band_radius(contact_id: str, layer) -> float:
    inner, outer = ring_bounds(layer)
    r = hash_to_unit(f"{contact_id}:radius")
    return inner + (outer - inner) * (0.3 + r * 0.5)


def position(node: LayoutNode, angle_override: Optional[float] = None) -> PositionedContact:
    shown_on = effective_layer(node.layer, node.needs_attention)
    # Distant contacts cannot move outward but still sit on the rim.
    drifting = node.needs_attention

    if angle_override is not None:
        angle = angle_override % TWO_PI
    else:
        angle = default_angle(node.contact_id)

    if drifting:
        radius = ring_bounds(shown_on)[1]
    else:
        radius = band_radius(node.contact_id, shown_on)

    return PositionedContact(
        contact_id=node.contact_id,
        x=math.cos(angle) * radius,
        y=math.sin(angle) * radius,
        angle=angle,
        radius=radius,
        layer=RelationshipLayer(node.layer),
        effective_layer=shown_on,
        needs_attention=node.needs_attention,
        drifting=drifting,
    )


def layout(
    nodes: Iterable[LayoutNode],
    angle_overrides: Optional[Dict[str, float]] = None,
) -> List[PositionedContact]:
    """Position every contact. Overlapping nodes are left as they fall."""
    overrides = angle_overrides or {}
    return [position(node, overrides.get(node.contact_id)) for node in nodes]
