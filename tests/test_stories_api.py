"""Tests for story authoring and the moderation workflow over HTTP."""

import pytest
from fastapi.testclient import TestClient

from conftest import STORY

PARENT = "parent-1"
OTHER = "parent-2"
ADMIN = "admin-1"


def create_story(client: TestClient, headers: dict[str, str], **overrides) -> dict:
    resp = client.post("/api/stories", json={**STORY, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreateStory:
    """Creating stories."""

    def test_requires_authentication(self, client: TestClient) -> None:
        resp = client.post("/api/stories", json=STORY)
        assert resp.status_code == 401
        assert resp.json()["error"] == "Unauthorized"
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_rejects_invalid_token(self, client: TestClient) -> None:
        resp = client.post(
            "/api/stories",
            json=STORY,
            headers={"Authorization": "Bearer fake-token-123"},
        )
        assert resp.status_code == 401

    def test_parent_story_starts_as_draft(self, client: TestClient, auth) -> None:
        story = create_story(client, auth(PARENT), voiceoverUrl="https://cdn/voice.mp3")

        assert story["status"] == "draft"
        assert story["userId"] == PARENT
        assert story["voiceoverUrl"] == "https://cdn/voice.mp3"
        assert story["approvedBy"] is None
        assert story["reviewedAt"] is None
        assert story["rejectionReason"] is None
        assert story["id"]
        assert story["createdAt"]

    def test_admin_story_is_published_immediately(
        self, client: TestClient, make_admin
    ) -> None:
        story = create_story(client, make_admin(ADMIN))

        assert story["status"] == "published"
        assert story["approvedBy"] == ADMIN
        assert story["reviewedAt"] is not None

    def test_client_cannot_set_review_fields(self, client: TestClient, auth) -> None:
        story = create_story(
            client,
            auth(PARENT),
            status="published",
            approvedBy=PARENT,
            reviewedAt="2024-01-01T00:00:00Z",
        )

        assert story["status"] == "draft"
        assert story["approvedBy"] is None
        assert story["reviewedAt"] is None

    @pytest.mark.parametrize("missing", ["title", "content", "summary", "imageUrl"])
    def test_missing_field_is_rejected(self, client: TestClient, auth, missing: str) -> None:
        payload = {k: v for k, v in STORY.items() if k != missing}
        resp = client.post("/api/stories", json=payload, headers=auth(PARENT))
        assert resp.status_code == 400
        assert resp.json()["error"] == "Validation error"

    def test_blank_field_is_rejected(self, client: TestClient, auth) -> None:
        resp = client.post(
            "/api/stories",
            json={**STORY, "title": "   "},
            headers=auth(PARENT),
        )
        assert resp.status_code == 400
        assert "title" in resp.json()["error"]


class TestModerationScenario:
    """The full draft -> review -> publish round trip."""

    def test_reject_edit_resubmit_approve(
        self, client: TestClient, auth, make_admin
    ) -> None:
        parent = auth(PARENT)
        admin = make_admin(ADMIN)

        story = create_story(client, parent)
        story_id = story["id"]
        assert story["status"] == "draft"

        resp = client.post(f"/api/stories/{story_id}/submit", headers=parent)
        assert resp.status_code == 200
        assert resp.json()["status"] == "pending_review"

        resp = client.post(
            f"/api/admin/review-story/{story_id}",
            json={"action": "reject", "rejectionReason": "needs work"},
            headers=admin,
        )
        assert resp.status_code == 200
        rejected = resp.json()
        assert rejected["status"] == "draft"
        assert rejected["rejectionReason"] == "needs work"
        assert rejected["approvedBy"] == ADMIN
        assert rejected["reviewedAt"] is not None

        resp = client.patch(
            f"/api/stories/{story_id}",
            json={"content": "A better story"},
            headers=parent,
        )
        assert resp.status_code == 200
        edited = resp.json()
        assert edited["status"] == "draft"
        assert edited["content"] == "A better story"
        assert edited["title"] == "T"

        resp = client.post(f"/api/stories/{story_id}/submit", headers=parent)
        assert resp.json()["status"] == "pending_review"

        resp = client.post(
            f"/api/admin/review-story/{story_id}",
            json={"action": "approve"},
            headers=admin,
        )
        assert resp.status_code == 200
        approved = resp.json()
        assert approved["status"] == "published"
        assert approved["approvedBy"] == ADMIN
        assert approved["rejectionReason"] is None

        feed = client.get("/api/stories").json()
        assert [s["id"] for s in feed] == [story_id]

    def test_reject_without_reason_uses_default(
        self, client: TestClient, auth, make_admin, settings
    ) -> None:
        parent = auth(PARENT)
        admin = make_admin(ADMIN)
        story_id = create_story(client, parent)["id"]
        client.post(f"/api/stories/{story_id}/submit", headers=parent)

        resp = client.post(
            f"/api/admin/review-story/{story_id}",
            json={"action": "reject"},
            headers=admin,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "draft"
        assert resp.json()["rejectionReason"] == settings.default_rejection_reason


class TestInvalidTransitions:
    """Actions from the wrong state or by the wrong caller fail."""

    def test_submit_twice_fails(self, client: TestClient, auth) -> None:
        parent = auth(PARENT)
        story_id = create_story(client, parent)["id"]
        client.post(f"/api/stories/{story_id}/submit", headers=parent)

        resp = client.post(f"/api/stories/{story_id}/submit", headers=parent)
        assert resp.status_code == 400
        body = resp.json()
        assert body["details"]["status"] == "pending_review"
        assert body["details"]["expected"] == "draft"

    def test_submit_published_story_fails_even_for_admin(
        self, client: TestClient, make_admin
    ) -> None:
        admin = make_admin(ADMIN)
        story_id = create_story(client, admin)["id"]

        resp = client.post(f"/api/stories/{story_id}/submit", headers=admin)
        assert resp.status_code == 400
        assert resp.json()["details"]["status"] == "published"

    def test_edit_pending_story_fails(self, client: TestClient, auth) -> None:
        parent = auth(PARENT)
        story_id = create_story(client, parent)["id"]
        client.post(f"/api/stories/{story_id}/submit", headers=parent)

        resp = client.patch(
            f"/api/stories/{story_id}",
            json={"title": "Sneaky"},
            headers=parent,
        )
        assert resp.status_code == 400
        assert client.get(f"/api/stories/{story_id}", headers=parent).json()["title"] == "T"

    def test_edit_ignores_status_fields(self, client: TestClient, auth) -> None:
        parent = auth(PARENT)
        story_id = create_story(client, parent)["id"]

        resp = client.patch(
            f"/api/stories/{story_id}",
            json={"title": "New", "status": "published", "approvedBy": PARENT},
            headers=parent,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "draft"
        assert resp.json()["approvedBy"] is None

    def test_empty_edit_is_rejected(self, client: TestClient, auth) -> None:
        parent = auth(PARENT)
        story_id = create_story(client, parent)["id"]

        resp = client.patch(f"/api/stories/{story_id}", json={}, headers=parent)
        assert resp.status_code == 400

    def test_other_users_cannot_submit_or_edit(self, client: TestClient, auth) -> None:
        story_id = create_story(client, auth(PARENT))["id"]
        other = auth(OTHER)

        assert client.post(f"/api/stories/{story_id}/submit", headers=other).status_code == 404
        resp = client.patch(f"/api/stories/{story_id}", json={"title": "X"}, headers=other)
        assert resp.status_code == 404

    def test_unknown_story(self, client: TestClient, auth) -> None:
        resp = client.post("/api/stories/missing/submit", headers=auth(PARENT))
        assert resp.status_code == 404
        assert resp.json()["error"] == "Story 'missing' not found"

    @pytest.mark.parametrize("action", ["approve", "reject"])
    def test_review_requires_pending_story(
        self, client: TestClient, auth, make_admin, action: str
    ) -> None:
        admin = make_admin(ADMIN)
        draft_id = create_story(client, auth(PARENT))["id"]
        published_id = create_story(client, admin)["id"]

        for story_id in (draft_id, published_id):
            resp = client.post(
                f"/api/admin/review-story/{story_id}",
                json={"action": action},
                headers=admin,
            )
            assert resp.status_code == 400
            assert resp.json()["details"]["expected"] == "pending_review"

    def test_review_unknown_action(self, client: TestClient, auth, make_admin) -> None:
        parent = auth(PARENT)
        admin = make_admin(ADMIN)
        story_id = create_story(client, parent)["id"]
        client.post(f"/api/stories/{story_id}/submit", headers=parent)

        resp = client.post(
            f"/api/admin/review-story/{story_id}",
            json={"action": "publish"},
            headers=admin,
        )
        assert resp.status_code == 400

    def test_review_requires_admin(self, client: TestClient, auth) -> None:
        parent = auth(PARENT)
        story_id = create_story(client, parent)["id"]
        client.post(f"/api/stories/{story_id}/submit", headers=parent)

        resp = client.post(
            f"/api/admin/review-story/{story_id}",
            json={"action": "approve"},
            headers=parent,
        )
        assert resp.status_code == 403
        mine = client.get("/api/stories/my-submissions", headers=parent).json()
        assert mine[0]["status"] == "pending_review"


class TestListings:
    """Feed, own submissions and visibility rules."""

    def test_feed_only_contains_published_stories(
        self, client: TestClient, auth, make_admin
    ) -> None:
        parent = auth(PARENT)
        admin = make_admin(ADMIN)

        create_story(client, parent, title="draft")
        pending_id = create_story(client, parent, title="pending")["id"]
        client.post(f"/api/stories/{pending_id}/submit", headers=parent)
        rejected_id = create_story(client, parent, title="rejected")["id"]
        client.post(f"/api/stories/{rejected_id}/submit", headers=parent)
        client.post(
            f"/api/admin/review-story/{rejected_id}",
            json={"action": "reject"},
            headers=admin,
        )
        create_story(client, admin, title="published")

        feed = client.get("/api/stories").json()
        assert [s["title"] for s in feed] == ["published"]
        assert all(s["status"] == "published" for s in feed)

    def test_feed_is_newest_first_and_preview_is_limited(
        self, client: TestClient, make_admin
    ) -> None:
        admin = make_admin(ADMIN)
        for i in range(5):
            create_story(client, admin, title=f"story {i}")

        feed = client.get("/api/stories").json()
        assert [s["title"] for s in feed] == [f"story {i}" for i in range(4, -1, -1)]

        preview = client.get("/api/stories/preview").json()
        assert [s["title"] for s in preview] == ["story 4", "story 3", "story 2"]

    def test_my_submissions_lists_every_status(self, client: TestClient, auth) -> None:
        parent = auth(PARENT)
        first = create_story(client, parent, title="first")["id"]
        create_story(client, parent, title="second")
        client.post(f"/api/stories/{first}/submit", headers=parent)
        create_story(client, auth(OTHER), title="not mine")

        mine = client.get("/api/stories/my-submissions", headers=parent).json()
        assert [(s["title"], s["status"]) for s in mine] == [
            ("second", "draft"),
            ("first", "pending_review"),
        ]

    def test_my_submissions_requires_auth(self, client: TestClient) -> None:
        assert client.get("/api/stories/my-submissions").status_code == 401

    def test_unpublished_story_visible_to_owner_and_admin_only(
        self, client: TestClient, auth, make_admin
    ) -> None:
        parent = auth(PARENT)
        story_id = create_story(client, parent)["id"]

        assert client.get(f"/api/stories/{story_id}", headers=parent).status_code == 200
        assert client.get(f"/api/stories/{story_id}", headers=make_admin(ADMIN)).status_code == 200
        assert client.get(f"/api/stories/{story_id}", headers=auth(OTHER)).status_code == 404
        assert client.get(f"/api/stories/{story_id}").status_code == 404

    def test_published_story_is_public(self, client: TestClient, make_admin) -> None:
        story_id = create_story(client, make_admin(ADMIN))["id"]
        resp = client.get(f"/api/stories/{story_id}")
        assert resp.status_code == 200
        assert resp.json()["status"] == "published"

    def test_timestamps_keep_utc_offset_when_read_back(
        self, client: TestClient, auth, make_admin
    ) -> None:
        parent = auth(PARENT)
        admin = make_admin(ADMIN)
        created = create_story(client, parent)
        client.post(f"/api/stories/{created['id']}/submit", headers=parent)
        client.post(
            f"/api/admin/review-story/{created['id']}",
            json={"action": "approve"},
            headers=admin,
        )

        fetched = client.get(f"/api/stories/{created['id']}").json()
        assert created["createdAt"].endswith("Z")
        assert fetched["createdAt"] == created["createdAt"]
        assert fetched["reviewedAt"].endswith("Z")
        assert client.get("/api/stories").json()[0]["createdAt"] == created["createdAt"]
