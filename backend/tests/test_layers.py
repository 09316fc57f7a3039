import pytest

from circles.models.contact import RelationshipLayer
from circles.models.opportunity import Priority
from circles.services.layers import LAYER_ORDER, effective_layer, layer_index, priority_for_layer


def test_layer_order():
    assert [layer.value for layer in LAYER_ORDER] == ["vip", "inner", "regular", "occasional", "distant"]
    assert layer_index("vip") == 0
    assert layer_index(RelationshipLayer.DISTANT) == 4


@pytest.mark.parametrize(
    "nominal,expected",
    [
        ("vip", RelationshipLayer.INNER),
        ("inner", RelationshipLayer.REGULAR),
        ("regular", RelationshipLayer.OCCASIONAL),
        ("occasional", RelationshipLayer.DISTANT),
        ("distant", RelationshipLayer.DISTANT),
    ],
)
def test_drift_moves_one_ring_outward(nominal, expected):
    assert effective_layer(nominal, True) == expected


@pytest.mark.parametrize("layer", list(RelationshipLayer))
def test_no_drift_without_attention(layer):
    assert effective_layer(layer, False) == layer


def test_vip_examples():
    assert effective_layer("vip", True) == "inner"
    assert effective_layer("vip", False) == "vip"
    assert effective_layer("distant", True) == "distant"


def test_unknown_layer_is_rejected():
    with pytest.raises(ValueError):
        effective_layer("acquaintance", True)


def test_priority_by_layer():
    assert priority_for_layer("vip") == Priority.HIGH
    assert priority_for_layer("inner") == Priority.HIGH
    assert priority_for_layer("regular") == Priority.MEDIUM
    assert priority_for_layer("occasional") == Priority.LOW
    assert priority_for_layer("distant") == Priority.LOW
    assert priority_for_layer("unknown") == Priority.MEDIUM
