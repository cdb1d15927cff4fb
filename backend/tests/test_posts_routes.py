"""
Blog Backend: Posts API Tests
==============================

What:  End-to-end tests for GET /posts, POST /posts and GET /posts/{id}.
How:   HTTPX AsyncClient against the ASGI app, backed by in-memory SQLite.
       Server failures are simulated by overriding the gateway dependency.
"""

import pytest

from blog_app.exceptions import DatabaseError, ValidationError
from blog_app.routes.posts import parse_post_id
from blog_app.services.post_gateway import get_post_gateway


class FailingGateway:
    """Stands in for PostGateway when the database is down."""

    def __init__(self):
        self.error = DatabaseError(
            context={"original_error": "OperationalError", "detail": "password authentication failed"}
        )

    async def list_posts(self):
        raise self.error

    async def find_post_by_id(self, post_id):
        raise self.error

    async def create_post(self, **kwargs):
        raise self.error


@pytest.fixture
def failing_gateway(test_app):
    test_app.dependency_overrides[get_post_gateway] = FailingGateway
    return test_app


class TestParsePostId:
    """Tests for the path identifier parser."""

    def test_plain_digits(self):
        assert parse_post_id("42") == 42

    def test_signed(self):
        assert parse_post_id("-3") == -3
        assert parse_post_id("+7") == 7

    @pytest.mark.parametrize("raw", ["abc", "12abc", "1.5", " 1", "1_000", "", "٣"])
    def test_rejects_non_integers(self, raw):
        with pytest.raises(ValidationError, match="invalid id"):
            parse_post_id(raw)


class TestListPosts:
    """Tests for GET /posts."""

    @pytest.mark.asyncio
    async def test_empty_database_returns_empty_array(self, test_client):
        response = await test_client.get("/posts")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_newest_first_with_author_joined(self, test_client, author, make_post, utc):
        await make_post(author.id, "first", utc(2025, 5, 10, 9))
        await make_post(author.id, "third", utc(2025, 5, 12, 9))
        await make_post(author.id, "second", utc(2025, 5, 11, 9))

        response = await test_client.get("/posts")

        assert response.status_code == 200
        body = response.json()
        assert [p["title"] for p in body] == ["third", "second", "first"]
        created = [p["createdAt"] for p in body]
        assert created == sorted(created, reverse=True)
        assert body[0]["author"] == {"id": author.id, "name": "A", "email": "a@x.com"}
        assert body[0]["authorId"] == author.id

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, failing_gateway, test_client):
        response = await test_client.get("/posts")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "password" not in response.text
        assert "OperationalError" not in response.text


class TestCreatePost:
    """Tests for POST /posts."""

    @pytest.mark.asyncio
    async def test_creates_post_with_defaults(self, test_client, author):
        response = await test_client.post(
            "/posts", json={"title": "T", "content": "C", "authorId": author.id}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["published"] is False
        assert body["authorId"] == author.id
        assert body["title"] == "T"
        assert body["content"] == "C"
        assert "createdAt" in body
        # Creation returns the raw record, not the joined view
        assert "author" not in body

    @pytest.mark.asyncio
    async def test_created_post_is_readable(self, test_client, author):
        created = await test_client.post(
            "/posts", json={"title": "T", "content": "C", "authorId": author.id}
        )
        new_id = created.json()["id"]

        response = await test_client.get(f"/posts/{new_id}")

        assert response.status_code == 200
        body = response.json()
        assert body.pop("author") == {"id": author.id, "name": "A", "email": "a@x.com"}
        assert body == created.json()

    @pytest.mark.asyncio
    async def test_created_at_is_utc_in_create_and_read(self, test_client, author):
        created = await test_client.post(
            "/posts", json={"title": "T", "content": "C", "authorId": author.id}
        )
        listed = await test_client.get("/posts")

        assert created.json()["createdAt"].endswith("Z")
        assert listed.json()[0]["createdAt"] == created.json()["createdAt"]

    @pytest.mark.asyncio
    async def test_published_flag_is_kept(self, test_client, author):
        response = await test_client.post(
            "/posts",
            json={"title": "T", "content": "C", "authorId": author.id, "published": True},
        )

        assert response.status_code == 201
        assert response.json()["published"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"content": "C", "authorId": 1},
            {"title": "T", "authorId": 1},
            {"title": "", "content": "C", "authorId": 1},
            {"title": "T", "content": "   ", "authorId": 1},
            {},
        ],
    )
    async def test_missing_title_or_content_is_400_and_writes_nothing(
        self, test_client, author, payload
    ):
        response = await test_client.post("/posts", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "title and content are required"
        assert (await test_client.get("/posts")).json() == []

    @pytest.mark.asyncio
    async def test_title_check_comes_before_author_check(self, test_client):
        response = await test_client.post("/posts", json={"content": "C"})

        assert response.status_code == 400
        assert response.json()["message"] == "title and content are required"

    @pytest.mark.asyncio
    async def test_missing_author_id_is_400(self, test_client, author):
        response = await test_client.post("/posts", json={"title": "T", "content": "C"})

        assert response.status_code == 400
        assert response.json()["message"] == "authorId is required"
        assert (await test_client.get("/posts")).json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "T", "content": "C", "authorId": "1"},
            {"title": "T", "content": "C", "authorId": 1, "published": "yes"},
            {"title": 5, "content": "C", "authorId": 1},
        ],
    )
    async def test_wrong_field_types_are_400(self, test_client, author, payload):
        response = await test_client.post("/posts", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_non_json_body_is_400(self, test_client):
        response = await test_client.post(
            "/posts", content=b"not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_author_is_404_and_writes_nothing(self, test_client):
        response = await test_client.post(
            "/posts", json={"title": "T", "content": "C", "authorId": 999}
        )

        assert response.status_code == 404
        assert response.json()["message"] == "author not found"
        assert (await test_client.get("/posts")).json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("author_id", [99999999999999999999, 2**31, -(2**31) - 1])
    async def test_author_id_beyond_column_range_is_404(self, test_client, author_id):
        response = await test_client.post(
            "/posts", json={"title": "T", "content": "C", "authorId": author_id}
        )

        assert response.status_code == 404
        assert response.json()["message"] == "author not found"
        assert (await test_client.get("/posts")).json() == []

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, failing_gateway, test_client):
        response = await test_client.post(
            "/posts", json={"title": "T", "content": "C", "authorId": 1}
        )

        assert response.status_code == 500
        assert "password" not in response.text


class TestGetPost:
    """Tests for GET /posts/{id}."""

    @pytest.mark.asyncio
    async def test_returns_post_with_author(self, test_client, author, make_post, utc):
        post = await make_post(author.id, "Hello", utc(2025, 5, 10), published=True)

        response = await test_client.get(f"/posts/{post.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == post.id
        assert body["published"] is True
        assert body["author"]["id"] == author.id

    @pytest.mark.asyncio
    async def test_missing_post_is_404(self, test_client):
        response = await test_client.get("/posts/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert response.json()["message"] == "post not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["99999999999999999999", "2147483648", "-2147483649"])
    async def test_id_beyond_column_range_is_404(self, test_client, raw_id):
        response = await test_client.get(f"/posts/{raw_id}")

        assert response.status_code == 404
        assert response.json()["message"] == "post not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["abc", "12abc", "1.5"])
    async def test_non_numeric_id_is_400(self, test_client, raw_id):
        response = await test_client.get(f"/posts/{raw_id}")

        assert response.status_code == 400
        assert response.json()["message"] == "invalid id"

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_400_even_when_database_is_down(
        self, failing_gateway, test_client
    ):
        response = await test_client.get("/posts/abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, failing_gateway, test_client):
        response = await test_client.get("/posts/1")

        assert response.status_code == 500
        assert response.json()["message"] == "An internal error occurred. Please try again later."
