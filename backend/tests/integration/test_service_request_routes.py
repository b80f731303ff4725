"""
Integration tests for the public intake form and status lookup.
"""
import pytest

from repairdesk.lib.jwt import create_access_token


pytestmark = pytest.mark.integration


def intake_form(**overrides):
    form = {
        "customerName": "Priya Sharma",
        "email": "priya@example.com",
        "phone": "+91 9876543210",
        "address": "12 Court Road, Saharanpur",
        "serviceType": "Computer Repair",
        "description": "Desktop restarts randomly",
        "urgency": "High",
        "preferredDate": "2099-01-01",
    }
    form.update(overrides)
    return form


def test_guest_submission_creates_pending_ticket(client):
    response = client.post("/service-requests", json=intake_form())

    assert response.status_code == 201
    request_id = response.json()["id"]

    ticket = client.get(f"/service-requests/{request_id}").json()
    assert ticket["id"] == request_id
    assert ticket["status"] == "Pending"
    assert ticket["customerName"] == "Priya Sharma"
    assert ticket["userId"] is None
    assert ticket["createdAt"] is not None


def test_signed_in_submission_is_linked_to_token_owner(client, customer_headers):
    response = client.post(
        "/service-requests",
        json=intake_form(userId="someone-else"),
        headers=customer_headers,
    )

    ticket = client.get(f"/service-requests/{response.json()['id']}").json()
    assert ticket["userId"] == "user-john"


def test_missing_fields_are_reported_per_field(client):
    response = client.post("/service-requests", json={"customerName": "Only A Name", "preferredDate": "2099-01-01"})

    assert response.status_code == 422
    errors = response.json()["details"]["errors"]
    assert set(errors) == {"email", "phone", "address", "serviceType", "description"}


def test_invalid_email_and_past_date_are_rejected(client):
    response = client.post(
        "/service-requests",
        json=intake_form(email="not-an-email", preferredDate="2000-01-01"),
    )

    errors = response.json()["details"]["errors"]
    assert response.status_code == 422
    assert errors["email"] == "Invalid email format"
    assert errors["preferredDate"] == "Preferred date cannot be in the past"


def test_other_services_requires_custom_service(client):
    missing = client.post("/service-requests", json=intake_form(serviceType="Other Services"))
    given = client.post(
        "/service-requests",
        json=intake_form(serviceType="Other Services", customService="Data recovery"),
    )

    assert missing.status_code == 422
    assert "customService" in missing.json()["details"]["errors"]
    assert given.status_code == 201


def test_unknown_service_type_is_rejected(client):
    response = client.post("/service-requests", json=intake_form(serviceType="Teleportation"))

    assert response.status_code == 422
    assert response.json()["error"] == "Validation error"


def test_invalid_token_is_rejected(client):
    response = client.post(
        "/service-requests",
        json=intake_form(),
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 401


def test_lookup_by_ticket_id(client):
    response = client.get("/service-requests/lookup", params={"query": " SC-002 "})

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == ["SC-002"]


def test_lookup_by_email_ignores_case(client):
    response = client.get("/service-requests/lookup", params={"query": "Mike.Davis@Home.NET"})

    assert [t["id"] for t in response.json()] == ["SC-003"]


def test_lookup_by_phone(client):
    response = client.get("/service-requests/lookup", params={"query": "+1-555-0123"})

    assert [t["id"] for t in response.json()] == ["SC-001"]


def test_submitted_email_is_found_by_lookup(client):
    client.post("/service-requests", json=intake_form())

    response = client.get("/service-requests/lookup", params={"query": "priya@example.com"})

    assert [t["customerName"] for t in response.json()] == ["Priya Sharma"]


def test_mixed_case_email_is_found_by_either_spelling(client):
    request_id = client.post("/service-requests", json=intake_form(email="Priya@Example.com")).json()["id"]

    for query in ("Priya@Example.com", "priya@example.com"):
        response = client.get("/service-requests/lookup", params={"query": query})
        assert [t["id"] for t in response.json()] == [request_id]


def test_lookup_without_match_is_empty(client):
    response = client.get("/service-requests/lookup", params={"query": "nobody@nowhere.com"})

    assert response.status_code == 200
    assert response.json() == []


def test_blank_lookup_is_a_bad_request(client):
    response = client.get("/service-requests/lookup", params={"query": "   "})

    assert response.status_code == 400


def test_unknown_ticket_is_not_found(client):
    response = client.get("/service-requests/SC-999")

    assert response.status_code == 404
    assert response.json()["details"]["resource_id"] == "SC-999"


def test_submission_without_store_is_unavailable(unconfigured_client):
    response = unconfigured_client.post("/service-requests", json=intake_form())

    assert response.status_code == 503


def test_lookup_without_store_is_empty(unconfigured_client):
    response = unconfigured_client.get("/service-requests/lookup", params={"query": "a@b.com"})

    assert response.status_code == 200
    assert response.json() == []


def test_token_without_email_can_still_submit(client):
    token = create_access_token("phone-only-user")

    response = client.post(
        "/service-requests",
        json=intake_form(),
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 201
