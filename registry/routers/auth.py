import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from registry.db.db import get_session
from registry.models.user import User
from registry.schemas.auth_schemas import GoogleAuthPayload, TokenResponse
from registry.services.identity import (
    is_administrator,
    is_institutional,
    registration_number_for_email,
    user_id_for_email,
)
from registry.utils.auth_helper import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/google", response_model=TokenResponse)
def google_auth(payload: GoogleAuthPayload, session: Session = Depends(get_session)):
    if not is_institutional(payload.email):
        logger.info("Rejected sign-in from non-institutional account")
        raise HTTPException(
            status_code=403,
            detail="Access Denied: Only institutional accounts are permitted.",
        )

    email = payload.email.strip().lower()
    db_user = session.get(User, user_id_for_email(email))

    if not db_user:
        registration_number = registration_number_for_email(email)
        name = payload.name or ("System Admin" if is_administrator(email) else f"Student {registration_number}")

        db_user = User(
            id=user_id_for_email(email),
            email=email,
            name=name,
            registration_number=registration_number,
            profile_picture=payload.picture,
        )
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
        logger.info("Created user %s on first sign-in", db_user.id)

    token, expires_at = create_access_token(db_user)

    return TokenResponse(
        access_token=token,
        expires_at=expires_at,
        user_id=db_user.id,
        onboarded=db_user.onboarded,
        is_admin=is_administrator(db_user.email),
    )
