"""
Tests for the /contact endpoints
"""
from uuid import uuid4


def _login(client, email: str, password: str) -> dict:
    r = client.post("/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}


def test_register_login_create_list_delete_scenario(client):
    headers = _login(client, "a@x.com", "pw1")

    r = client.post(
        "/contact",
        json={"email": "c@x.com", "firstName": "Jo", "lastName": "Do", "phone": "+33612345678"},
        headers=headers,
    )
    assert r.status_code == 201
    assert r.json()["message"] == "Contact added successfully"
    contact = r.json()["contact"]
    assert contact["phone"] == "+33612345678"

    r = client.get("/contact", headers=headers)
    assert r.status_code == 200
    assert r.json()["count"] == 1

    r = client.delete(f"/contact/{contact['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json() == {
        "message": "Contact deleted successfully",
        "deletedContact": {"id": contact["id"], "firstName": "Jo", "lastName": "Do"},
    }

    r = client.get("/contact", headers=headers)
    assert r.json()["count"] == 0
    assert r.json()["contacts"] == []


def test_create_without_auth(client, valid_contact):
    r = client.post("/contact", json=valid_contact)
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_create_missing_fields(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    r = client.post("/contact", json={"email": "c@x.com"}, headers=headers)
    assert r.status_code == 400
    assert "firstName" in r.json()["message"]


def test_create_invalid_phone(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())

    r = client.post("/contact", json={**valid_contact, "phone": "invalid"}, headers=headers)
    assert r.status_code == 400
    assert "phone" in r.json()["message"]


def test_create_duplicate_phone(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())
    client.post("/contact", json=valid_contact, headers=headers)

    r = client.post("/contact", json={**valid_contact, "firstName": "Jane"}, headers=headers)
    assert r.status_code == 400
    assert r.json() == {"message": "Contact with this phone already exists"}


def test_list_projection_has_no_owner(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())
    client.post("/contact", json=valid_contact, headers=headers)

    r = client.get("/contact", headers=headers)
    body = r.json()
    assert body["message"] == "Contacts retrieved successfully"
    assert set(body["contacts"][0]) == {"id", "email", "firstName", "lastName", "phone"}


def test_get_contact_round_trip(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())
    created = client.post("/contact", json=valid_contact, headers=headers).json()["contact"]

    r = client.get(f"/contact/{created['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Contact retrieved successfully"
    assert r.json()["contact"] == {"id": created["id"], **valid_contact}


def test_get_unknown_and_malformed_id(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    r = client.get(f"/contact/{uuid4()}", headers=headers)
    assert r.status_code == 404
    assert r.json() == {"message": "Contact not found"}

    r = client.get("/contact/invalid-id", headers=headers)
    assert r.status_code == 404


def test_cross_user_isolation(client, make_user, auth_headers, valid_contact):
    """Another user can neither see nor change a contact"""
    alice_headers = auth_headers(make_user())
    bob_headers = auth_headers(make_user())
    contact = client.post("/contact", json=valid_contact, headers=alice_headers).json()["contact"]
    url = f"/contact/{contact['id']}"

    assert client.get("/contact", headers=bob_headers).json()["count"] == 0
    assert client.get(url, headers=bob_headers).status_code == 404
    assert client.patch(url, json={"firstName": "Mallory"}, headers=bob_headers).status_code == 404
    assert client.delete(url, headers=bob_headers).status_code == 404

    r = client.get(url, headers=alice_headers)
    assert r.status_code == 200
    assert r.json()["contact"]["firstName"] == "John"


def test_update_contact(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())
    contact = client.post("/contact", json=valid_contact, headers=headers).json()["contact"]

    r = client.patch(
        f"/contact/{contact['id']}",
        json={"lastName": "Smith", "user_id": str(uuid4()), "color": "blue"},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["message"] == "Contact updated successfully"
    assert r.json()["contact"] == {**valid_contact, "id": contact["id"], "lastName": "Smith"}


def test_update_phone_to_same_value(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())
    contact = client.post("/contact", json=valid_contact, headers=headers).json()["contact"]

    r = client.patch(f"/contact/{contact['id']}", json={"phone": valid_contact["phone"]}, headers=headers)
    assert r.status_code == 200


def test_update_phone_to_duplicate(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())
    client.post("/contact", json=valid_contact, headers=headers)
    other = client.post(
        "/contact", json={**valid_contact, "phone": "0987654321"}, headers=headers
    ).json()["contact"]

    r = client.patch(f"/contact/{other['id']}", json={"phone": valid_contact["phone"]}, headers=headers)
    assert r.status_code == 400
    assert r.json() == {"message": "Contact with this phone already exists"}


def test_update_unknown_contact(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    r = client.patch(f"/contact/{uuid4()}", json={"firstName": "X"}, headers=headers)
    assert r.status_code == 404


def test_contact_routes_require_auth(client):
    contact_id = uuid4()
    assert client.get("/contact").status_code == 401
    assert client.get(f"/contact/{contact_id}").status_code == 401
    assert client.patch(f"/contact/{contact_id}", json={}).status_code == 401
    assert client.delete(f"/contact/{contact_id}").status_code == 401


def test_unsupported_method(client, make_user, auth_headers):
    r = client.put("/contact", json={}, headers=auth_headers(make_user()))
    assert r.status_code == 405


def test_update_without_body_changes_nothing(client, make_user, auth_headers, valid_contact):
    headers = auth_headers(make_user())
    contact = client.post("/contact", json=valid_contact, headers=headers).json()["contact"]

    r = client.patch(f"/contact/{contact['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["contact"] == {**valid_contact, "id": contact["id"]}


def test_only_create_response_carries_owner(client, make_user, auth_headers, valid_contact):
    user = make_user()
    headers = auth_headers(user)
    created = client.post("/contact", json=valid_contact, headers=headers).json()["contact"]
    assert created["user_id"] == str(user.id)

    fetched = client.get(f"/contact/{created['id']}", headers=headers).json()["contact"]
    assert "user_id" not in fetched
