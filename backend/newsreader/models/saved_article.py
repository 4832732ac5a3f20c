# newsreader/models/saved_article.py
from tortoise import fields, models


class SavedArticle(models.Model):
    """
    Article bookmarked by an account.
    - user: owning account; rows go away with the account (ON DELETE CASCADE)
    - title / url: copied from the news feed at save time
    - (user, url) is unique: an account saves a given article once
    """
    id = fields.IntField(pk=True)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="saved_articles",
        on_delete=fields.CASCADE,
    )
    title = fields.TextField()
    url = fields.CharField(max_length=2048)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "news_posts"
        unique_together = (("user", "url"),)
