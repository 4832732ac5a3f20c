# newsreader/schemas/admin.py
"""
Pydantic schemas for admin user management endpoints.
"""
from .auth import ProfileIn

__all__ = ["AdminUserIn"]


class AdminUserIn(ProfileIn):
    """
    Request model for the admin create and edit forms.

    On edit, an empty password keeps the existing hash. is_admin mirrors the
    form checkbox: an unchecked box is simply absent from the submission.
    """
    username: str = ""
    password: str = ""
    confirm_password: str = ""
    is_admin: bool = False

    def form_values(self) -> dict:
        return self.model_dump(exclude={"password", "confirm_password"})
