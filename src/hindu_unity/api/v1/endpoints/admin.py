"""Administrative endpoints: user management, executive approval and statistics."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from hindu_unity.api.v1.dependencies import ManagerDep, SessionDep, SuperAdminDep
from hindu_unity.models import ImportedAccount, Profile
from hindu_unity.models.profile import ROLE_EXECUTIVE
from hindu_unity.schemas.admin import (
    AdminStats,
    AdminUserResponse,
    DashboardStats,
    ImportedAccountResponse,
)
from hindu_unity.services.roles import can_manage_user
from hindu_unity.services.stats import admin_stats, dashboard_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_profile_or_404(db: Session, user_id: int) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return profile


def _ensure_can_manage(actor: Profile, target: Profile) -> None:
    if not can_manage_user(actor, target):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot manage this user",
        )


@router.get("/users", response_model=list[AdminUserResponse])
async def list_users(
    current_user: ManagerDep,
    db: SessionDep,
    search: str | None = Query(None, max_length=100, description="Match name, email or role"),
) -> list[Profile]:
    """List all members, newest first, optionally filtered by a search term."""
    query = db.query(Profile)
    term = (search or "").strip()
    if term:
        pattern = f"%{term}%"
        query = query.filter(
            or_(
                Profile.full_name.ilike(pattern),
                Profile.email.ilike(pattern),
                Profile.role.ilike(pattern),
            )
        )
    return query.order_by(Profile.created_at.desc(), Profile.id.desc()).all()


@router.post("/users/{user_id}/suspend", response_model=AdminUserResponse)
async def toggle_suspend(user_id: int, current_user: ManagerDep, db: SessionDep) -> Profile:
    """Suspend the member, or lift an existing suspension.

    A suspended member's open sessions end on their next request.
    """
    target = _get_profile_or_404(db, user_id)
    _ensure_can_manage(current_user, target)
    target.is_suspended = not target.is_suspended
    db.commit()
    logger.info(
        "Profile %s %s profile %s",
        current_user.id,
        "suspended" if target.is_suspended else "reinstated",
        target.id,
    )
    return target


@router.post("/users/{user_id}/approve", response_model=AdminUserResponse)
async def approve_user(user_id: int, current_user: SuperAdminDep, db: SessionDep) -> Profile:
    target = _get_profile_or_404(db, user_id)
    _ensure_can_manage(current_user, target)
    target.is_approved = True
    db.commit()
    return target


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, current_user: ManagerDep, db: SessionDep) -> Response:
    """Delete a member along with everything they created."""
    target = _get_profile_or_404(db, user_id)
    _ensure_can_manage(current_user, target)
    db.delete(target)
    db.commit()
    logger.info("Profile %s deleted profile %s", current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _get_pending_executive_or_404(db: Session, user_id: int) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None or profile.role != ROLE_EXECUTIVE or profile.is_approved:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Pending executive not found",
        )
    return profile


@router.get("/executives/pending", response_model=list[AdminUserResponse])
async def list_pending_executives(current_user: SuperAdminDep, db: SessionDep) -> list[Profile]:
    """Executives waiting for approval, oldest request first."""
    return (
        db.query(Profile)
        .filter(Profile.role == ROLE_EXECUTIVE, Profile.is_approved.is_(False))
        .order_by(Profile.created_at.asc(), Profile.id.asc())
        .all()
    )


@router.post("/executives/{user_id}/approve", response_model=AdminUserResponse)
async def approve_executive(user_id: int, current_user: SuperAdminDep, db: SessionDep) -> Profile:
    profile = _get_pending_executive_or_404(db, user_id)
    profile.is_approved = True
    db.commit()
    logger.info("Profile %s approved executive %s", current_user.id, profile.id)
    return profile


@router.delete("/executives/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def reject_executive(user_id: int, current_user: SuperAdminDep, db: SessionDep) -> Response:
    """Reject an executive application by deleting the account."""
    profile = _get_pending_executive_or_404(db, user_id)
    db.delete(profile)
    db.commit()
    logger.info("Profile %s rejected executive %s", current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=AdminStats)
async def get_stats(current_user: SuperAdminDep, db: SessionDep) -> AdminStats:
    return admin_stats(db)


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(current_user: ManagerDep, db: SessionDep) -> DashboardStats:
    """Activity figures for the executive dashboard."""
    return dashboard_stats(db)


def _imported_account_view(account: ImportedAccount, profile: Profile | None) -> ImportedAccountResponse:
    return ImportedAccountResponse(
        user_id=account.user_id,
        username=account.username,
        claimed=account.claimed,
        full_name=profile.full_name if profile else None,
        email=profile.email if profile else None,
    )


@router.get("/imported-accounts", response_model=list[ImportedAccountResponse])
async def list_imported_accounts(
    current_user: SuperAdminDep,
    db: SessionDep,
    claim: Literal["all", "claimed", "unclaimed"] = Query("all"),
    search: str | None = Query(
        None,
        max_length=100,
        description="Match the imported username or email",
    ),
) -> list[ImportedAccountResponse]:
    """List accounts created by the content importer."""
    query = db.query(ImportedAccount, Profile).join(Profile, Profile.id == ImportedAccount.user_id)
    if claim != "all":
        query = query.filter(ImportedAccount.claimed.is_(claim == "claimed"))
    term = (search or "").strip()
    if term:
        pattern = f"%{term}%"
        query = query.filter(
            or_(ImportedAccount.username.ilike(pattern), Profile.email.ilike(pattern))
        )
    rows = query.order_by(ImportedAccount.username.asc()).all()
    return [_imported_account_view(account, profile) for account, profile in rows]


@router.post("/imported-accounts/{user_id}/toggle-claim", response_model=ImportedAccountResponse)
async def toggle_claim(user_id: int, current_user: SuperAdminDep, db: SessionDep) -> ImportedAccountResponse:
    """Flip the claimed flag of an imported account."""
    account = db.get(ImportedAccount, user_id)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Imported account not found",
        )
    account.claimed = not account.claimed
    db.commit()
    return _imported_account_view(account, db.get(Profile, user_id))
