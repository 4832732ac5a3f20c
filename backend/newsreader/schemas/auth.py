# newsreader/schemas/auth.py
"""
Pydantic schemas for sign-up, login and the preferences page.
Values arrive from HTML forms, so every field defaults to an empty string
and validation happens in the services (to re-render the form, not 422).
"""
from pydantic import BaseModel

__all__ = ["ProfileIn", "SignupIn", "LoginIn", "PasswordChangeIn"]


class ProfileIn(BaseModel):
    """
    Profile attributes shared by sign-up, admin forms and the preferences page.
    Empty strings are stored as NULL.
    """
    first_name: str = ""
    last_name: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    preference_1: str = ""
    preference_2: str = ""
    preference_3: str = ""


class SignupIn(ProfileIn):
    """Request model for the sign-up form."""
    username: str = ""
    password: str = ""
    confirm_password: str = ""

    def form_values(self) -> dict:
        """Values echoed back into the form on error (never the passwords)."""
        return self.model_dump(exclude={"password", "confirm_password"})


class LoginIn(BaseModel):
    """Request model for the login form."""
    username: str = ""
    password: str = ""


class PasswordChangeIn(BaseModel):
    """Request model for changing one's own password."""
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""
