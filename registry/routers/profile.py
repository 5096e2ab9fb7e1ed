from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from registry.db.db import get_session
from registry.models.item import Item, ItemStatus, ItemType
from registry.models.user import User
from registry.schemas.items_schemas import ItemRead
from registry.schemas.profile_schemas import (
    MyItemsResponse,
    OnboardingPayload,
    ProfileRead,
    ProfileUpdatePayload,
    ThemePayload,
)
from registry.services.identity import is_administrator
from registry.utils.auth_helper import get_current_user, get_onboarded_user


router = APIRouter()


def to_profile(user: User) -> ProfileRead:
    return ProfileRead(
        id=user.id,
        email=user.email,
        name=user.name,
        registration_number=user.registration_number,
        profile_picture=user.profile_picture,
        branch=user.branch,
        year_of_study=user.year_of_study,
        residency=user.residency,
        theme=user.theme,
        trust_score=user.trust_score,
        resolved_count=user.resolved_count,
        onboarded=user.onboarded,
        is_admin=is_administrator(user.email),
        created_at=user.created_at,
    )


@router.get("/me", response_model=ProfileRead)
def get_my_profile(current_user: User = Depends(get_current_user)):
    return to_profile(current_user)


@router.post("/onboard", response_model=ProfileRead)
def onboard(
    payload: OnboardingPayload,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if current_user.onboarded:
        raise HTTPException(status_code=403, detail="Profile already completed")

    current_user.name = payload.name
    current_user.branch = payload.branch
    current_user.year_of_study = payload.year_of_study
    current_user.residency = payload.residency
    if payload.profile_picture:
        current_user.profile_picture = payload.profile_picture
    current_user.onboarded = True

    session.add(current_user)
    session.commit()
    session.refresh(current_user)

    return to_profile(current_user)


@router.patch("/me", response_model=ProfileRead)
def update_profile(
    payload: ProfileUpdatePayload,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(current_user, field, value)

    session.add(current_user)
    session.commit()
    session.refresh(current_user)

    return to_profile(current_user)


@router.post("/theme")
def set_theme(
    payload: ThemePayload,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    current_user.theme = payload.theme

    session.add(current_user)
    session.commit()

    return {"ok": True}


@router.get("/items", response_model=MyItemsResponse)
def get_my_items(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    items = session.exec(
        select(Item)
        .where(Item.reporter_id == current_user.id)
        .order_by(Item.created_at.desc())
    ).all()

    # Separate by type
    lost_items = [ItemRead.from_item(item) for item in items if item.type == ItemType.lost]
    found_items = [ItemRead.from_item(item) for item in items if item.type == ItemType.found]

    return MyItemsResponse(
        open_cases=sum(1 for item in items if item.status != ItemStatus.resolved),
        lost_items=lost_items,
        found_items=found_items,
    )
