# newsreader/models/user.py
"""
Database model for accounts.
Represents a login identity: username, password hash and admin flag.
"""
from tortoise import fields, models


def normalize_username(username: str) -> str:
    """Lookup key for case-insensitive username matching."""
    return (username or "").strip().lower()


class User(models.Model):
    """
    Account database model.

    Relationships:
    - Has one Person profile (one-to-one, via related_name="profile")
    - Has many SavedArticles (one-to-many, via related_name="saved_articles")

    Security:
    - Password is stored as a salted hash (never store plain text passwords)
    - username_key carries the unique index, so "Alice" and "alice" collide
      at the storage layer even if two sign-ups race past the application check
    """
    id = fields.IntField(pk=True, source_field="user_id")  # Primary key: numeric account identifier
    username = fields.CharField(max_length=255)  # Login name as the user typed it
    username_key = fields.CharField(max_length=255, unique=True, index=True)  # Lowercased username
    password_hash = fields.CharField(max_length=255, source_field="password")  # argon2 hash
    is_admin = fields.BooleanField(default=False)  # Grants access to the admin console
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    async def save(self, *args, **kwargs) -> None:
        self.username_key = normalize_username(self.username)
        await super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.username
