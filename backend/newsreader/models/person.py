# newsreader/models/person.py
"""
Database model for profiles.
Descriptive attributes attached one-to-one to an account.
"""
from tortoise import fields, models

# Profile columns editable through sign-up, admin forms and the preferences page
PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "city",
    "state",
    "country",
    "preference_1",
    "preference_2",
    "preference_3",
)


class Person(models.Model):
    """
    Profile database model.

    Every Person belongs to exactly one User. Both rows are created and
    deleted together inside a single transaction, so a Person never
    outlives its account.
    """
    id = fields.IntField(pk=True, source_field="person_id")  # Profile identifier used in admin URLs
    user = fields.OneToOneField(
        "models.User",
        related_name="profile",
        on_delete=fields.CASCADE,
    )  # Owning account (user_id column)
    first_name = fields.CharField(max_length=100, null=True)
    last_name = fields.CharField(max_length=100, null=True)
    city = fields.CharField(max_length=100, null=True)
    state = fields.CharField(max_length=100, null=True)
    country = fields.CharField(max_length=100, null=True)
    # Free-text reading preferences
    preference_1 = fields.TextField(null=True)
    preference_2 = fields.TextField(null=True)
    preference_3 = fields.TextField(null=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "person"

    def profile_values(self) -> dict:
        """Profile fields as a dict, None rendered as empty strings for forms."""
        return {name: getattr(self, name) or "" for name in PROFILE_FIELDS}
