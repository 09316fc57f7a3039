import math
from datetime import timedelta

from conftest import NOW


def test_layout_rings(client, auth_headers):
    layout = client.get("/api/network/layout", headers=auth_headers).json()

    assert [r["layer"] for r in layout["rings"]] == ["vip", "inner", "regular", "occasional", "distant"]
    assert (layout["rings"][0]["inner_radius"], layout["rings"][0]["outer_radius"]) == (40, 80)
    assert (layout["rings"][1]["inner_radius"], layout["rings"][1]["outer_radius"]) == (88, 160)
    assert layout["contacts"] == []


def test_neglected_vip_drifts_to_inner_rim(client, auth_headers, create_contact):
    contact = create_contact(layer="vip", contact_frequency="weekly")

    layout = client.get("/api/network/layout", headers=auth_headers).json()

    node = layout["contacts"][0]
    assert node["contact_id"] == contact["id"]
    assert node["effective_layer"] == "inner"
    assert node["drifting"] is True
    assert node["radius"] == 160
    assert layout["needs_attention_count"] == 1
    counts = {r["layer"]: r["contact_count"] for r in layout["rings"]}
    assert counts["inner"] == 1
    assert counts["vip"] == 0


def test_fresh_contact_sits_inside_its_band(client, auth_headers, create_contact):
    create_contact(layer="regular", last_contact_at=(NOW - timedelta(days=1)).isoformat())

    node = client.get("/api/network/layout", headers=auth_headers).json()["contacts"][0]

    assert node["drifting"] is False
    assert 168 <= node["radius"] <= 240
    assert math.isclose(math.hypot(node["x"], node["y"]), node["radius"])


def test_angle_override_round_trip(client, auth_headers, create_contact):
    contact = create_contact()
    url = f"/api/network/positions/{contact['id']}"

    assert client.put(url, json={"angle": 1.25}, headers=auth_headers).status_code == 204
    node = client.get("/api/network/layout", headers=auth_headers).json()["contacts"][0]
    assert node["pinned"] is True
    assert math.isclose(node["angle"], 1.25)

    assert client.delete(url, headers=auth_headers).status_code == 204
    node = client.get("/api/network/layout", headers=auth_headers).json()["contacts"][0]
    assert node["pinned"] is False

    assert client.delete(url, headers=auth_headers).status_code == 404


def test_override_requires_own_contact(client, other_headers, create_contact):
    contact = create_contact()
    response = client.put(
        f"/api/network/positions/{contact['id']}",
        json={"angle": 0.5},
        headers=other_headers,
    )
    assert response.status_code == 404
