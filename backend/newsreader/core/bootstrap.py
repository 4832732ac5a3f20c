# newsreader/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import logging

from newsreader.config import settings
from newsreader.models.user import User, normalize_username
from newsreader.services.accounts import create_account

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin() -> User | None:
    """
    If no admin exists in the database, create a default admin (with an
    empty profile) based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with is_admin=True
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_USERNAME (default: "admin")
      ADMIN_PASSWORD (required, otherwise won't create)
    """
    # Check if any admin user already exists
    has_admin = await User.filter(is_admin=True).exists()
    if has_admin:
        return None  # Skip creation if admin already exists

    admin_password = settings.admin_password
    if not admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None  # Don't create admin without password (security requirement)

    # If username is already taken (someone may have signed up as "admin"), create a non-conflicting name
    base_username = settings.admin_username
    admin_username = base_username
    suffix = 1
    while await User.filter(username_key=normalize_username(admin_username)).exists():
        suffix += 1
        admin_username = f"{base_username}{suffix}"  # Append number suffix to make unique

    u = await create_account(admin_username, admin_password, {}, is_admin=True)
    logger.warning("[bootstrap] Created default admin -> username=%s id=%s", u.username, u.id)
    return u
