import math

import pytest

from circles.models.contact import RelationshipLayer
from circles.services.layout import (
    CENTER_RADIUS,
    RING_GAP,
    LayoutNode,
    _hash_string,
    hash_to_unit,
    layout,
    ring_bounds,
)

IDS = [
    "2f1c6c2e-5b0a-4c55-9d0e-1e8f6f1d7a11",
    "7a0e0b7c-3c2d-4d8e-8f1a-5b6c7d8e9f00",
    "c3d4e5f6-a7b8-49c0-9d1e-2f3a4b5c6d7e",
    "contact-4",
    "x",
]


def test_string_hash_matches_31_fold():
    assert _hash_string("") == 0
    assert _hash_string("a") == 97
    assert _hash_string("ab") == 97 * 31 + 98


def test_string_hash_wraps_to_signed_32_bits():
    value = _hash_string("a fairly long contact identifier that overflows")
    assert -(2 ** 31) <= value < 2 ** 31


@pytest.mark.parametrize("key", IDS)
def test_hash_to_unit_range(key):
    value = hash_to_unit(key)
    assert 0.0 <= value < 1.0
    assert value == hash_to_unit(key)


def test_ring_bounds():
    assert ring_bounds("vip") == (CENTER_RADIUS, 80)
    assert ring_bounds("inner") == (80 + RING_GAP, 160)
    assert ring_bounds(RelationshipLayer.DISTANT) == (320 + RING_GAP, 400)


def test_layout_is_deterministic():
    nodes = [LayoutNode(cid, "regular", i % 2 == 0) for i, cid in enumerate(IDS)]
    first = layout(nodes)
    second = layout(nodes)
    assert [(p.angle, p.radius) for p in first] == [(p.angle, p.radius) for p in second]


def test_settled_contact_sits_in_middle_of_its_band():
    for cid in IDS:
        p = layout([LayoutNode(cid, "occasional", False)])[0]
        inner, outer = ring_bounds("occasional")
        width = outer - inner
        assert inner + 0.3 * width <= p.radius <= inner + 0.8 * width
        assert not p.drifting
        assert p.effective_layer == RelationshipLayer.OCCASIONAL


@pytest.mark.parametrize(
    "layer,shown_on",
    [("vip", "inner"), ("inner", "regular"), ("regular", "occasional"), ("occasional", "distant")],
)
def test_drifting_contact_pinned_to_outer_edge_of_effective_ring(layer, shown_on):
    p = layout([LayoutNode("drifter", layer, True)])[0]
    assert p.drifting
    assert p.effective_layer == shown_on
    assert p.radius == ring_bounds(shown_on)[1]


def test_distant_contact_needing_attention_stays_on_distant_rim():
    p = layout([LayoutNode("far-away", "distant", True)])[0]
    assert p.effective_layer == RelationshipLayer.DISTANT
    assert p.radius == 400


def test_coordinates_follow_angle_and_radius():
    for p in layout([LayoutNode(cid, "inner", False) for cid in IDS]):
        assert 0.0 <= p.angle < 2 * math.pi
        assert p.x == pytest.approx(math.cos(p.angle) * p.radius)
        assert p.y == pytest.approx(math.sin(p.angle) * p.radius)


def test_angle_override_wins_and_radius_still_tracks_attention():
    node = LayoutNode("dragged", "vip", False)
    settled = layout([node], {"dragged": 1.25})[0]
    assert settled.angle == pytest.approx(1.25)
    assert settled.x == pytest.approx(math.cos(1.25) * settled.radius)

    drifting = layout([LayoutNode("dragged", "vip", True)], {"dragged": 1.25})[0]
    assert drifting.angle == pytest.approx(1.25)
    assert drifting.radius == 160


def test_angle_override_is_normalized():
    p = layout([LayoutNode("spun", "regular", False)], {"spun": -math.pi / 2})[0]
    assert p.angle == pytest.approx(3 * math.pi / 2)


def test_overrides_for_other_contacts_are_ignored():
    plain = layout([LayoutNode("a", "regular", False)])[0]
    other = layout([LayoutNode("a", "regular", False)], {"b": 0.5})[0]
    assert plain.angle == other.angle
