"""Test suite for concurrent operations."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

CONVERSATION_URL = "/api/chat/advanced-conversation"


@pytest.mark.asyncio
async def test_concurrent_conversations(app, auth_headers):
    """Test starting multiple conversations concurrently."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        responses = await asyncio.gather(
            *[
                client.post(CONVERSATION_URL, json={"message": f"Idea number {i} for a bakery"}, headers=auth_headers)
                for i in range(10)
            ]
        )

        assert all(r.status_code == 200 for r in responses)
        conversation_ids = [r.json()["conversationId"] for r in responses]
        assert len(set(conversation_ids)) == 10  # All IDs should be unique


@pytest.mark.asyncio
async def test_concurrent_messages(app, auth_headers):
    """Concurrent turns on one conversation are all stored."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(CONVERSATION_URL, json={"message": "hi"}, headers=auth_headers)
        conversation_id = response.json()["conversationId"]

        responses = await asyncio.gather(
            *[
                client.post(
                    CONVERSATION_URL,
                    json={"message": f"Our target market is students, point {i}", "conversationId": conversation_id},
                    headers=auth_headers
                )
                for i in range(5)
            ]
        )

        assert all(r.status_code == 200 for r in responses)
        assert all(r.json()["conversationId"] == conversation_id for r in responses)

        response = await client.get(f"/api/chat/conversations/{conversation_id}/messages", headers=auth_headers)
        all_messages = response.json()
        assert len(all_messages) == 12  # 6 user messages + 6 assistant replies
        assert sum(1 for m in all_messages if m["role"] == "user") == 6


@pytest.mark.asyncio
async def test_concurrent_error_handling(app, auth_headers):
    """Test error handling under concurrent load."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        bad_ids = [f"00000000-0000-0000-0000-{i:012d}" for i in range(5)]
        responses = await asyncio.gather(
            *[
                client.get(f"/api/chat/conversations/{conv_id}/messages", headers=auth_headers)
                for conv_id in bad_ids
            ]
        )
        assert all(r.status_code == 404 for r in responses)


@pytest.mark.asyncio
async def test_high_concurrency_load(app, auth_headers, coffee_shop_message):
    """Test system under high concurrent load."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(CONVERSATION_URL, json={"message": "hi"}, headers=auth_headers)
        conversation_id = response.json()["conversationId"]

        num_requests = 50
        batch_size = 10
        for i in range(0, num_requests, batch_size):
            responses = await asyncio.gather(
                *[
                    client.post(
                        CONVERSATION_URL,
                        json={"message": coffee_shop_message, "conversationId": conversation_id},
                        headers=auth_headers
                    )
                    for _ in range(batch_size)
                ]
            )
            assert all(r.status_code == 200 for r in responses)
            assert all(r.json()["confidence"] == 90 for r in responses)

        response = await client.get(
            f"/api/chat/conversations/{conversation_id}/messages?limit=500", headers=auth_headers
        )
        assert len(response.json()) == (num_requests + 1) * 2
