import pytest
from httpx import AsyncClient

from blog_api.config import settings

COMMENTS = "/api/v1/comments"

@pytest.mark.asyncio
async def test_thread_is_readable_anonymously(test_client: AsyncClient, test_post, auth_headers):
    post_id = test_post.id
    await test_client.post(f"{COMMENTS}/posts/{post_id}", json={"content": "Hi"}, headers=auth_headers)

    response = await test_client.get(f"{COMMENTS}/posts/{post_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["post_id"] == post_id
    assert data["total"] == 1
    assert data["comments"][0]["content"] == "Hi"
    assert data["comments"][0]["liked"] is False

@pytest.mark.asyncio
async def test_create_reply_and_read_tree(test_client: AsyncClient, test_post, auth_headers, other_headers):
    post_id = test_post.id

    response = await test_client.post(
        f"{COMMENTS}/posts/{post_id}", json={"content": "Root"}, headers=auth_headers
    )
    assert response.status_code == 201
    root_id = response.json()["comments"][0]["id"]

    response = await test_client.post(
        f"{COMMENTS}/posts/{post_id}",
        json={"content": "Reply", "parent_id": root_id},
        headers=other_headers
    )

    assert response.status_code == 201
    data = response.json()
    assert data["total"] == 2
    assert len(data["comments"]) == 1
    reply = data["comments"][0]["replies"][0]
    assert reply["content"] == "Reply"
    assert reply["parent_id"] == root_id
    assert reply["author"]["email"] == "reader@example.com"

@pytest.mark.asyncio
async def test_comment_requires_authentication(test_client: AsyncClient, test_post):
    response = await test_client.post(f"{COMMENTS}/posts/{test_post.id}", json={"content": "Hi"})

    assert response.status_code == 401
    assert response.json()["code"] == "not_authenticated"

@pytest.mark.asyncio
async def test_invalid_token_is_treated_as_anonymous(test_client: AsyncClient, test_post):
    response = await test_client.post(
        f"{COMMENTS}/posts/{test_post.id}",
        json={"content": "Hi"},
        headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401

@pytest.mark.asyncio
async def test_blank_comment_is_unprocessable(test_client: AsyncClient, test_post, auth_headers):
    post_id = test_post.id

    response = await test_client.post(
        f"{COMMENTS}/posts/{post_id}", json={"content": "   "}, headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["code"] == "empty_content"
    thread = await test_client.get(f"{COMMENTS}/posts/{post_id}")
    assert thread.json()["total"] == 0

@pytest.mark.asyncio
async def test_comment_on_missing_post_is_not_found(test_client: AsyncClient, auth_headers):
    response = await test_client.post(
        f"{COMMENTS}/posts/does-not-exist", json={"content": "Hi"}, headers=auth_headers
    )

    assert response.status_code == 404

@pytest.mark.asyncio
async def test_delete_removes_replies(test_client: AsyncClient, test_post, auth_headers, other_headers):
    post_id = test_post.id
    response = await test_client.post(
        f"{COMMENTS}/posts/{post_id}", json={"content": "Root"}, headers=auth_headers
    )
    root_id = response.json()["comments"][0]["id"]
    await test_client.post(
        f"{COMMENTS}/posts/{post_id}",
        json={"content": "Reply", "parent_id": root_id},
        headers=other_headers
    )

    response = await test_client.delete(f"{COMMENTS}/{root_id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"post_id": post_id, "comments": [], "total": 0}

@pytest.mark.asyncio
async def test_cannot_delete_someone_elses_comment(test_client: AsyncClient, test_post, auth_headers, other_headers):
    post_id = test_post.id
    response = await test_client.post(
        f"{COMMENTS}/posts/{post_id}", json={"content": "Mine"}, headers=auth_headers
    )
    comment_id = response.json()["comments"][0]["id"]

    response = await test_client.delete(f"{COMMENTS}/{comment_id}", headers=other_headers)

    assert response.status_code == 403
    thread = await test_client.get(f"{COMMENTS}/posts/{post_id}")
    assert thread.json()["total"] == 1

@pytest.mark.asyncio
async def test_like_toggle_round_trip(test_client: AsyncClient, test_post, auth_headers, other_headers):
    post_id = test_post.id
    response = await test_client.post(
        f"{COMMENTS}/posts/{post_id}", json={"content": "Nice"}, headers=auth_headers
    )
    comment_id = response.json()["comments"][0]["id"]

    liked = await test_client.post(f"{COMMENTS}/{comment_id}/like", headers=other_headers)

    assert liked.status_code == 200
    body = liked.json()
    assert body["liked"] is True
    assert body["thread"]["comments"][0]["like_count"] == 1
    assert body["thread"]["comments"][0]["liked"] is True

    unliked = await test_client.post(f"{COMMENTS}/{comment_id}/like", headers=other_headers)

    body = unliked.json()
    assert body["liked"] is False
    assert body["thread"]["comments"][0]["like_count"] == 0

@pytest.mark.asyncio
async def test_like_requires_authentication(test_client: AsyncClient, test_post, auth_headers):
    response = await test_client.post(
        f"{COMMENTS}/posts/{test_post.id}", json={"content": "Nice"}, headers=auth_headers
    )
    comment_id = response.json()["comments"][0]["id"]

    response = await test_client.post(f"{COMMENTS}/{comment_id}/like")

    assert response.status_code == 401

@pytest.mark.asyncio
async def test_overlong_comment_is_unprocessable(test_client: AsyncClient, test_post, auth_headers):
    response = await test_client.post(
        f"{COMMENTS}/posts/{test_post.id}",
        json={"content": "x" * (settings.COMMENT_MAX_LENGTH + 1)},
        headers=auth_headers
    )

    assert response.status_code == 422
