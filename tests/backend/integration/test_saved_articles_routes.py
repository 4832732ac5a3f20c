import pytest

from newsreader.models.person import Person
from newsreader.models.saved_article import SavedArticle
from newsreader.services import directory


pytestmark = pytest.mark.asyncio

ARTICLE = {"title": "Coral reef recovering", "url": "https://example.com/reef"}


async def test_save_and_unsave_cycle(client, create_user, login):
    user, password = await create_user()
    await login(client, user.username, password)

    first = await client.post("/save-article", json=ARTICLE)
    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "Article saved."}

    dup = await client.post("/save-article", json=ARTICLE)
    assert dup.status_code == 409
    assert dup.json()["success"] is False
    assert dup.json()["message"] == "Article already saved."

    removed = await client.request("DELETE", "/unsave-article", json={"url": ARTICLE["url"]})
    assert removed.status_code == 200
    assert removed.json()["success"] is True

    again = await client.post("/save-article", json=ARTICLE)
    assert again.status_code == 200
    assert await SavedArticle.filter(user_id=user.id).count() == 1


async def test_save_requires_title_and_url(client, create_user, login):
    user, password = await create_user()
    await login(client, user.username, password)

    for body in ({"url": "https://example.com/x"}, {"title": "No link"}, {"title": " ", "url": " "}):
        resp = await client.post("/save-article", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Title and URL are required."}


async def test_unsave_missing_url_and_unknown_article(client, create_user, login):
    user, password = await create_user()
    await login(client, user.username, password)

    missing = await client.request("DELETE", "/unsave-article", json={})
    assert missing.status_code == 400

    unknown = await client.request("DELETE", "/unsave-article", json={"url": "https://example.com/none"})
    assert unknown.status_code == 404
    assert unknown.json()["success"] is False


async def test_save_endpoints_require_login(client):
    save = await client.post("/save-article", json=ARTICLE)
    assert save.status_code == 401
    assert save.json()["success"] is False

    unsave = await client.request("DELETE", "/unsave-article", json={"url": ARTICLE["url"]})
    assert unsave.status_code == 401


async def test_saved_articles_are_per_account(client, make_client, create_user, login):
    alice, alice_pw = await create_user()
    bob, bob_pw = await create_user()
    await login(client, alice.username, alice_pw)
    bob_client = await make_client()
    await login(bob_client, bob.username, bob_pw)

    assert (await client.post("/save-article", json=ARTICLE)).status_code == 200
    # Same URL for a different account is not a conflict
    assert (await bob_client.post("/save-article", json=ARTICLE)).status_code == 200

    # Bob cannot remove Alice's row: only his own goes
    assert (await bob_client.request("DELETE", "/unsave-article", json={"url": ARTICLE["url"]})).status_code == 200
    assert (await bob_client.request("DELETE", "/unsave-article", json={"url": ARTICLE["url"]})).status_code == 404
    assert await SavedArticle.filter(user_id=alice.id).count() == 1


async def test_save_after_account_deleted_is_unauthenticated(client, create_user, login):
    user, password = await create_user()
    await login(client, user.username, password)
    person = await Person.get(user_id=user.id)
    assert await directory.delete_user(person.id) is True

    resp = await client.post("/save-article", json=ARTICLE)
    assert resp.status_code == 401
    assert resp.json()["success"] is False
    assert resp.json()["message"] != "Article already saved."
    assert await SavedArticle.all().count() == 0


async def test_missing_or_malformed_body_is_a_400(client, create_user, login):
    user, password = await create_user()
    await login(client, user.username, password)

    empty = await client.post("/save-article")
    assert empty.status_code == 400
    assert empty.json() == {"success": False, "message": "Title and URL are required."}

    garbage = await client.post(
        "/save-article", content=b"not json", headers={"content-type": "application/json"}
    )
    assert garbage.status_code == 400
    assert garbage.json()["success"] is False

    wrong_shape = await client.post("/save-article", json=["https://example.com/x"])
    assert wrong_shape.status_code == 400

    unsave = await client.request("DELETE", "/unsave-article", content=b"{")
    assert unsave.status_code == 400
    assert unsave.json() == {"success": False, "message": "URL is required."}


async def test_only_web_urls_can_be_saved(client, create_user, login):
    user, password = await create_user()
    await login(client, user.username, password)

    for url in ("javascript:alert(1)", "data:text/html,hi", "example.com/no-scheme", "https://"):
        resp = await client.post("/save-article", json={"title": "Bad", "url": url})
        assert resp.status_code == 400
        assert resp.json()["success"] is False
    assert await SavedArticle.filter(user_id=user.id).count() == 0

    ok = await client.post("/save-article", json={"title": "Fine", "url": "HTTP://example.com/ok"})
    assert ok.status_code == 200
