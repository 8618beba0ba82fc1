"""API tests using FastAPI TestClient."""
import uuid
from datetime import datetime, timezone

from benchshare.core.security import hash_password
from benchshare.application.comment_workflow import CommentWorkflow
from benchshare.container import get_comment_workflow, get_session_store
from benchshare.core import config
from benchshare.domain.comment.rules import COMMENT_ERROR_MESSAGES
from benchshare.domain.page.models import UNPUBLISHED
from benchshare.errors import PersistenceFailed
from benchshare.persistence.db import get_connection

COMMENT = {
    "author": "Grace",
    "author_email": "grace@example.com",
    "author_url": "",
    "content": "Interesting numbers.",
}


def _login(client, username="admin", password="admin") -> dict:
    resp = client.post("/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def _create_user(username: str, role: str = "author") -> str:
    user_id = str(uuid.uuid4())
    conn = get_connection()
    conn.execute(
        """
        INSERT INTO users (id, username, password_hash, role, display_name, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, username, hash_password("secret"), role, username.title(),
         datetime.now(timezone.utc).isoformat()),
    )
    conn.commit()
    conn.close()
    return user_id


# ------------------------------------------------------------------
# Health + auth
# ------------------------------------------------------------------
def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_login_success_issues_session_cookie(client):
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"
    assert config.SESSION_COOKIE_NAME in resp.cookies


def test_login_bad_password(client):
    resp = client.post("/auth/login", json={"username": "admin", "password": "wrongpassword"})
    assert resp.status_code == 401


# ------------------------------------------------------------------
# Page view
# ------------------------------------------------------------------
def test_view_page_defaults_to_first_revision(client, seed_page):
    seed_page(init_html="<p>x</p><script>function init() {}</script>", setup="var a;")

    resp = client.get("/array-sort")

    assert resp.status_code == 200
    data = resp.json()
    assert data["page"]["revision"] == 1
    assert data["has_prep"] is True
    assert data["has_setup_or_teardown"] is True
    assert data["page_init"] is True
    assert data["stripped"] == "<p>x</p>"
    assert data["page"]["init_html_highlighted"]
    assert data["tests"][0]["code"] == "arr.sort()"
    assert data["authorized"] is False
    assert data["no_index"] is False
    assert data["show_atom"] == {"slug": "array-sort"}


def test_view_page_without_prep(client, seed_page):
    seed_page(init_html="")
    data = client.get("/array-sort/1").json()
    assert data["has_prep"] is False
    assert data["stripped"] is False
    assert data["page"]["init_html_highlighted"] is None


def test_view_missing_page(client, db):
    resp = client.get("/nope/4")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "The page was not found"}


def test_revision_zero_is_not_the_default_revision(client, seed_page):
    seed_page()
    assert client.get("/array-sort/0").status_code == 404
    assert client.get("/array-sort/0/publish", follow_redirects=False).status_code == 404


def test_hits_count_once_per_session(client, seed_page, page_repo):
    seed_page()

    client.get("/array-sort")
    client.get("/array-sort/1")
    assert page_repo.get_by_slug("array-sort", 1).page.hits == 1

    client.cookies.clear()
    client.get("/array-sort")
    assert page_repo.get_by_slug("array-sort", 1).page.hits == 2


def test_admin_preview_of_unpublished_page_is_noindex(client, seed_page):
    seed_page(visibility=UNPUBLISHED)

    assert client.get("/array-sort").json()["no_index"] is False

    headers = _login(client)
    data = client.get("/array-sort", headers=headers).json()
    assert data["is_admin"] is True
    assert data["no_index"] is True
    assert data["authorized"] is True


# ------------------------------------------------------------------
# Comments
# ------------------------------------------------------------------
def test_comment_requires_login(client, seed_page):
    seed_page()
    resp = client.post("/array-sort", json=COMMENT)
    assert resp.status_code == 401


def test_comment_on_missing_page(client, db):
    headers = _login(client)
    resp = client.post("/nope/2", json=COMMENT, headers=headers)
    assert resp.status_code == 404


def test_invalid_comment_is_redisplayed(client, seed_page):
    seed_page()
    headers = _login(client)
    payload = {k: v for k, v in COMMENT.items() if k != "content"}

    resp = client.post("/array-sort/1", json=payload, headers=headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["outcome"] == "redisplay"
    assert data["errors"] == {"content": COMMENT_ERROR_MESSAGES["content"]}
    assert data["form"]["author"] == "Grace"
    assert data["comments"] == []


def test_valid_comment_is_stored_with_forwarded_address(client, seed_page):
    seed_page()
    headers = {**_login(client), "X-Forwarded-For": "203.0.113.9, 10.0.0.2"}

    resp = client.post("/array-sort", json=COMMENT, headers=headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["outcome"] == "created"
    assert len(data["comments"]) == 1
    assert data["comments"][0]["content"] == "Interesting numbers."
    assert "ip" not in data["comments"][0]

    conn = get_connection()
    row = conn.execute("SELECT ip FROM comments").fetchone()
    conn.close()
    assert row["ip"] == "203.0.113.9"

    again = client.get("/array-sort").json()
    assert len(again["comments"]) == 1


def test_comment_storage_failure_is_a_client_error(client, seed_page):
    from benchshare.main import app

    class FailingComments:
        def create(self, page_id, ip, payload):
            raise PersistenceFailed("disk full")

    seed_page()
    headers = _login(client)
    app.dependency_overrides[get_comment_workflow] = lambda: CommentWorkflow(FailingComments())

    resp = client.post("/array-sort", json=COMMENT, headers=headers)

    assert resp.status_code == 400
    data = resp.json()
    assert data["outcome"] == "persistence_failed"
    assert data["form"] == COMMENT
    assert data["comments"] == []


# ------------------------------------------------------------------
# Publish
# ------------------------------------------------------------------
def test_publish_by_stranger_looks_like_missing_page(client, seed_page, page_repo):
    seed_page()
    seed_page(revision=2, visibility=UNPUBLISHED)

    hidden = client.get("/array-sort/2/publish", follow_redirects=False)
    missing = client.get("/does-not-exist/2/publish", follow_redirects=False)

    assert hidden.status_code == missing.status_code == 404
    assert hidden.json() == missing.json()
    assert page_repo.get_by_slug("array-sort", 2).page.visibility == UNPUBLISHED


def test_owner_can_publish(client, seed_page, page_repo):
    owner_id = _create_user("ada")
    seed_page(visibility=UNPUBLISHED, owner_id=owner_id)
    _login(client, "ada", "secret")

    resp = client.get("/array-sort/1/publish", follow_redirects=False)

    assert resp.status_code == 302
    assert resp.headers["location"] == "/array-sort/1"
    assert page_repo.get_by_slug("array-sort", 1).page.visibility == "published"


def test_session_ownership_allows_publish(client, seed_page, page_repo):
    page_id = seed_page(visibility=UNPUBLISHED)
    client.get("/health")
    session_id = client.cookies.get(config.SESSION_COOKIE_NAME)
    get_session_store().set(session_id, "own", {page_id: True})

    assert client.get("/array-sort").json()["no_index"] is True
    resp = client.get("/array-sort/1/publish", follow_redirects=False)
    assert resp.status_code == 302


def test_admin_publish_missing_revision(client, seed_page):
    seed_page()
    _login(client)
    resp = client.get("/array-sort/9/publish", follow_redirects=False)
    assert resp.status_code == 404


# ------------------------------------------------------------------
# Atom feed
# ------------------------------------------------------------------
def test_feed_lists_published_revisions(client, seed_page):
    seed_page()
    seed_page(revision=2, title="Second try", visibility=UNPUBLISHED)
    seed_page(revision=3, title="Third try")

    resp = client.get("/array-sort.atom")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/atom+xml;charset=UTF-8"
    assert resp.headers["last-modified"] == "Mon, 02 Mar 2026 10:00:00 GMT"
    body = resp.text
    assert "<feed" in body
    assert "Third try" in body
    assert "Second try" not in body
    assert body.index("/array-sort/3") < body.index("/array-sort/1<")


def test_feed_of_unpublished_page(client, seed_page):
    seed_page(visibility=UNPUBLISHED)
    assert client.get("/array-sort.atom").status_code == 404


def test_feed_of_missing_page(client, db):
    assert client.get("/nothing.atom").status_code == 404
