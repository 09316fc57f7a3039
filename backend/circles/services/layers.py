"""Relationship layers and the outward drift rule."""

from typing import Dict, List

from circles.models.contact import RelationshipLayer
from circles.models.opportunity import Priority

LAYER_ORDER: List[RelationshipLayer] = [
    RelationshipLayer.VIP,
    RelationshipLayer.INNER,
    RelationshipLayer.REGULAR,
    RelationshipLayer.OCCASIONAL,
    RelationshipLayer.DISTANT,
]

LAYER_CONFIG: Dict[RelationshipLayer, Dict] = {
    RelationshipLayer.VIP: {
        "label": "VIP",
        "radius": 80,
        "description": "Your closest relationships",
    },
    RelationshipLayer.INNER: {
        "label": "Inner Circle",
        "radius": 160,
        "description": "Close friends & key contacts",
    },
    RelationshipLayer.REGULAR: {
        "label": "Regular",
        "radius": 240,
        "description": "Maintain regular contact",
    },
    RelationshipLayer.OCCASIONAL: {
        "label": "Occasional",
        "radius": 320,
        "description": "Touch base periodically",
    },
    RelationshipLayer.DISTANT: {
        "label": "Distant",
        "radius": 400,
        "description": "Reconnect when relevant",
    },
}

LAYER_PRIORITY: Dict[RelationshipLayer, Priority] = {
    RelationshipLayer.VIP: Priority.HIGH,
    RelationshipLayer.INNER: Priority.HIGH,
    RelationshipLayer.REGULAR: Priority.MEDIUM,
    RelationshipLayer.OCCASIONAL: Priority.LOW,
    RelationshipLayer.DISTANT: Priority.LOW,
}


def layer_index(layer) -> int:
    return LAYER_ORDER.index(RelationshipLayer(layer))


def effective_layer(nominal_layer, needs_attention: bool) -> RelationshipLayer:
    """Layer a contact is displayed on.

    Contacts that need attention drift one ring outward. Distant contacts
    are already outermost and stay put.
    """
    layer = RelationshipLayer(nominal_layer)
    if not needs_attention or layer == RelationshipLayer.DISTANT:
        return layer
    return LAYER_ORDER[layer_index(layer) + 1]


def priority_for_layer(layer) -> Priority:
    try:
        return LAYER_PRIORITY[RelationshipLayer(layer)]
    except ValueError:
        return Priority.MEDIUM
