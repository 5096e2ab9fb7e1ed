import base64
import re
from typing import Optional

from registry.config import ADMIN_EMAIL, INSTITUTION_DOMAIN


def _registration_pattern():
    return re.compile(rf"^\d{{9}}@{re.escape(INSTITUTION_DOMAIN)}$", re.IGNORECASE)


def is_institutional(email: Optional[str]) -> bool:
    if not email:
        return False

    email = email.strip().lower()

    return (
        bool(_registration_pattern().match(email))
        or email.endswith(f"@{INSTITUTION_DOMAIN}")
        or email == ADMIN_EMAIL
    )


def is_administrator(email: Optional[str]) -> bool:
    if not email:
        return False
    return email.strip().lower() == ADMIN_EMAIL


def user_id_for_email(email: str) -> str:
    """Stable user id, reproducible from the email alone."""
    encoded = base64.b64encode(email.strip().lower().encode("utf-8")).decode("ascii")
    return re.sub(r"[/+=]", "", encoded)


def registration_number_for_email(email: str) -> str:
    if is_administrator(email):
        return "ADMIN"
    return email.strip().lower().split("@")[0] or "N/A"
