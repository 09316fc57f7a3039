from datetime import timedelta

from conftest import NOW


def attention_names(client, headers):
    response = client.get("/api/contacts", params={"needs_attention": "true"}, headers=headers)
    return [c["name"] for c in response.json()["contacts"]]


def test_logging_a_conversation_clears_attention(client, auth_headers, create_contact):
    contact = create_contact(name="Weekly Wendy", contact_frequency="weekly")
    assert attention_names(client, auth_headers) == ["Weekly Wendy"]

    response = client.post(
        "/api/conversations",
        json={"contact_id": contact["id"], "type": "call", "content": "Caught up about the move"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["occurred_at"].startswith("2026-10-14T12:00:00")
    updated = client.get(f"/api/contacts/{contact['id']}", headers=auth_headers).json()
    assert updated["last_contact_at"].startswith("2026-10-14T12:00:00")
    assert updated["needs_attention"] is False
    assert attention_names(client, auth_headers) == []


def test_backdated_conversation_sets_last_contact(client, auth_headers, create_contact):
    contact = create_contact(contact_frequency="weekly")
    occurred = NOW - timedelta(days=6)

    client.post(
        "/api/conversations",
        json={"contact_id": contact["id"], "content": "Coffee", "occurred_at": occurred.isoformat()},
        headers=auth_headers,
    )

    updated = client.get(f"/api/contacts/{contact['id']}", headers=auth_headers).json()
    assert updated["days_since_contact"] == 6
    # 6 days is past 80% of a 7 day target
    assert updated["needs_attention"] is True


def test_list_newest_first(client, auth_headers, create_contact):
    contact = create_contact()
    for days, content in ((3, "older"), (1, "newer")):
        client.post(
            "/api/conversations",
            json={
                "contact_id": contact["id"],
                "content": content,
                "occurred_at": (NOW - timedelta(days=days)).isoformat(),
            },
            headers=auth_headers,
        )

    response = client.get("/api/conversations", params={"contact_id": contact["id"]}, headers=auth_headers)
    assert [c["content"] for c in response.json()] == ["newer", "older"]


def test_cannot_log_for_someone_elses_contact(client, other_headers, create_contact):
    contact = create_contact()
    response = client.post(
        "/api/conversations",
        json={"contact_id": contact["id"], "content": "Hi"},
        headers=other_headers,
    )
    assert response.status_code == 404


def test_delete_conversation(client, auth_headers, create_contact):
    contact = create_contact()
    created = client.post(
        "/api/conversations",
        json={"contact_id": contact["id"], "content": "Hi"},
        headers=auth_headers,
    ).json()

    assert client.delete(f"/api/conversations/{created['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/conversations/{created['id']}", headers=auth_headers).status_code == 404
