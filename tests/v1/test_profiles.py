"""Tests for profile, capability and follow endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta

from fastapi import status

from hindu_unity.models import ImportedAccount


def test_get_me(client, member, member_headers) -> None:
    response = client.get("/api/v1/profiles/me", headers=member_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == member.id
    assert data["email"] == member.email
    assert "password_hash" not in data


def test_me_requires_auth(client) -> None:
    assert client.get("/api/v1/profiles/me").status_code == status.HTTP_401_UNAUTHORIZED


def test_update_me(client, member_headers) -> None:
    response = client.patch(
        "/api/v1/profiles/me",
        headers=member_headers,
        json={"full_name": "  Meera Devi ", "bio": "Seva every Sunday"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["full_name"] == "Meera Devi"
    assert response.json()["bio"] == "Seva every Sunday"

    cleared = client.patch("/api/v1/profiles/me", headers=member_headers, json={"bio": "   "})
    assert cleared.json()["bio"] is None
    assert cleared.json()["full_name"] == "Meera Devi"


def test_update_me_rejects_blank_name(client, member_headers) -> None:
    response = client.patch("/api/v1/profiles/me", headers=member_headers, json={"full_name": "  "})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_set_avatar(client, member_headers) -> None:
    url = "https://cdn.example.com/avatars/1.png"
    response = client.put("/api/v1/profiles/me/avatar", headers=member_headers, json={"avatar_url": url})
    assert response.json()["avatar_url"] == url


def test_capabilities_by_role(client, member_headers, volunteer_headers, executive_headers, admin_headers) -> None:
    member = client.get("/api/v1/profiles/me/capabilities", headers=member_headers).json()
    assert member["can_view_events"] is False
    assert member["can_manage_users"] is False

    volunteer = client.get("/api/v1/profiles/me/capabilities", headers=volunteer_headers).json()
    assert volunteer["can_organize"] is True
    assert volunteer["can_view_dashboard"] is False

    executive = client.get("/api/v1/profiles/me/capabilities", headers=executive_headers).json()
    assert executive["can_view_dashboard"] is True
    assert executive["can_view_admin"] is False

    admin = client.get("/api/v1/profiles/me/capabilities", headers=admin_headers).json()
    assert admin["can_view_admin"] is True
    assert admin["can_review_pending_posts"] is True


def test_pending_executive_capabilities(client, make_profile, headers_for) -> None:
    pending = make_profile("executive", is_approved=False)
    data = client.get("/api/v1/profiles/me/capabilities", headers=headers_for(pending)).json()
    assert data["role"] == "executive"
    assert data["pending_approval"] is True
    assert data["can_organize"] is True
    assert data["can_view_dashboard"] is False


def test_follow_flow(client, member, other_member, member_headers) -> None:
    url = f"/api/v1/profiles/{other_member.id}/follow"
    followed = client.post(url, headers=member_headers)
    assert followed.status_code == status.HTTP_201_CREATED
    assert followed.json()["follower_count"] == 1
    assert followed.json()["is_following"] is True

    assert client.post(url, headers=member_headers).status_code == status.HTTP_409_CONFLICT

    followers = client.get(f"/api/v1/profiles/{other_member.id}/followers").json()
    assert [profile["id"] for profile in followers] == [member.id]
    following = client.get(f"/api/v1/profiles/{member.id}/following").json()
    assert [profile["id"] for profile in following] == [other_member.id]

    assert client.delete(url, headers=member_headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.delete(url, headers=member_headers).status_code == status.HTTP_404_NOT_FOUND
    profile = client.get(f"/api/v1/profiles/{other_member.id}", headers=member_headers).json()
    assert profile["follower_count"] == 0
    assert profile["is_following"] is False


def test_cannot_follow_self(client, member, member_headers) -> None:
    response = client.post(f"/api/v1/profiles/{member.id}/follow", headers=member_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_public_profile_hides_email(client, member) -> None:
    response = client.get(f"/api/v1/profiles/{member.id}")
    assert response.status_code == status.HTTP_200_OK
    assert "email" not in response.json()
    assert client.get("/api/v1/profiles/9999").status_code == status.HTTP_404_NOT_FOUND


def test_user_posts_pinned_first(client, member, make_post) -> None:
    base = datetime(2025, 1, 1)
    older = make_post(member, content="older", created_at=base)
    newer = make_post(member, content="newer", created_at=base + timedelta(days=1))
    pinned = make_post(
        member,
        content="pinned",
        created_at=base - timedelta(days=1),
        user_pinned=True,
        user_pinned_at=base,
    )

    response = client.get(f"/api/v1/profiles/{member.id}/posts")
    assert [post["id"] for post in response.json()] == [pinned.id, newer.id, older.id]


def test_claim_status(client, db_session, member, other_member) -> None:
    db_session.add(ImportedAccount(user_id=member.id, username="meera_ig", claimed=False))
    db_session.flush()

    imported = client.get(f"/api/v1/profiles/{member.id}/claim-status").json()
    assert imported == {"user_id": member.id, "imported": True, "claimed": False, "username": "meera_ig"}

    native = client.get(f"/api/v1/profiles/{other_member.id}/claim-status").json()
    assert native["imported"] is False
