"""Tests for event endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import status


def test_volunteer_creates_event(client, volunteer, volunteer_headers, change_feed) -> None:
    response = client.post(
        "/api/v1/events/",
        headers=volunteer_headers,
        json={
            "title": "  Satsang evening ",
            "event_type": "meeting",
            "location": "Community hall",
            "event_date": "2030-05-01T18:30:00Z",
        },
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["title"] == "Satsang evening"
    assert data["event_type"] == "meeting"
    assert data["creator"]["id"] == volunteer.id


def test_member_cannot_create_or_list_events(client, member_headers) -> None:
    created = client.post(
        "/api/v1/events/",
        headers=member_headers,
        json={"title": "Nope", "event_date": "2030-05-01T18:30:00Z"},
    )
    assert created.status_code == status.HTTP_403_FORBIDDEN
    assert client.get("/api/v1/events/", headers=member_headers).status_code == status.HTTP_403_FORBIDDEN


def test_pending_executive_acts_as_volunteer(client, make_profile, headers_for) -> None:
    pending = make_profile("executive", is_approved=False)
    response = client.post(
        "/api/v1/events/",
        headers=headers_for(pending),
        json={"title": "Planning", "event_date": "2030-05-01T18:30:00Z"},
    )
    assert response.status_code == status.HTTP_201_CREATED


def test_blank_title_rejected(client, volunteer_headers) -> None:
    response = client.post(
        "/api/v1/events/",
        headers=volunteer_headers,
        json={"title": "   ", "event_date": "2030-05-01T18:30:00Z"},
    )
    assert response.status_code == 422


def test_list_events_soonest_first(client, volunteer, volunteer_headers, make_event) -> None:
    later = make_event(volunteer, title="Later", event_date=datetime(2031, 1, 1))
    sooner = make_event(volunteer, title="Sooner", event_date=datetime(2030, 6, 1))
    past = make_event(volunteer, title="Past", event_date=datetime(2020, 1, 1))

    everything = client.get("/api/v1/events/", headers=volunteer_headers).json()
    assert [event["id"] for event in everything] == [past.id, sooner.id, later.id]

    upcoming = client.get(
        "/api/v1/events/", headers=volunteer_headers, params={"upcoming": True}
    ).json()
    assert [event["id"] for event in upcoming] == [sooner.id, later.id]


def test_get_missing_event(client, member_headers) -> None:
    assert client.get("/api/v1/events/9999", headers=member_headers).status_code == 404


def test_delete_event_permissions(
    client, volunteer, make_profile, headers_for, admin_headers, make_event
) -> None:
    event = make_event(volunteer)
    other = make_profile("volunteer")

    forbidden = client.delete(f"/api/v1/events/{event.id}", headers=headers_for(other))
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    deleted = client.delete(f"/api/v1/events/{event.id}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/events/{event.id}", headers=admin_headers).status_code == 404


def test_creator_deletes_event(client, volunteer, volunteer_headers, make_event) -> None:
    event = make_event(volunteer)
    response = client.delete(f"/api/v1/events/{event.id}", headers=volunteer_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT


def test_upcoming_excludes_only_past_events(client, volunteer, volunteer_headers, make_event) -> None:
    make_event(volunteer, title="Last year", event_date=datetime(2001, 5, 1))
    future = make_event(volunteer, title="Next decade", event_date=datetime(2040, 5, 1))

    response = client.get("/api/v1/events/", headers=volunteer_headers, params={"upcoming": "true"})
    assert [event["title"] for event in response.json()] == [future.title]
