"""
Basic usage example for simple_http_client.

This example walks through every request verb against the public
JSONPlaceholder API, then shows default headers, derived clients,
concurrent requests and error handling.
"""

import asyncio
import logging

from simple_http_client import HTTPStatusError, HttpClient, RequestError, TimeoutError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API = "https://jsonplaceholder.typicode.com"


async def crud_requests(client: HttpClient):
    """Demonstrate GET, POST, PUT, PATCH and DELETE."""
    logger.info("Fetching users...")
    users = await client.get(f"{API}/users")
    logger.info(f"Found {len(users.data)} users, first is {users.data[0]['name']}")

    logger.info("Creating a post...")
    created = await client.post(f"{API}/posts", {"title": "Hello", "body": "First post", "userId": 1})
    post_id = created.data["id"]
    logger.info(f"Created post {post_id} (status {created.status})")

    updated = await client.put(f"{API}/posts/1", {"id": 1, "title": "Updated", "body": "...", "userId": 1})
    logger.info(f"Updated title: {updated.data['title']}")

    patched = await client.patch(f"{API}/posts/1", {"title": "Patched"})
    logger.info(f"Patched title: {patched.data['title']}")

    deleted = await client.delete(f"{API}/posts/1")
    logger.info(f"Deleted post (status {deleted.status})")


async def configuration(client: HttpClient):
    """Demonstrate default headers and derived clients."""
    client.set_default_headers({"X-Example": "basic-usage"})

    api_client = client.derive(timeout=2.0, headers={"Authorization": "Bearer demo"})
    logger.info(f"Parent: {client!r}")
    logger.info(f"Derived: {api_client!r}")

    response = await api_client.get(f"{API}/posts/1", headers={"Accept": "application/json"})
    logger.info(f"Post title: {response.data['title']}")


async def concurrent_requests(client: HttpClient):
    """Demonstrate concurrent requests on one client."""
    responses = await asyncio.gather(*[
        client.get(f"{API}/posts/{post_id}") for post_id in range(1, 4)
    ])
    for response in responses:
        logger.info(f"Post {response.data['id']}: {response.data['title']}")


async def error_handling(client: HttpClient):
    """Demonstrate failure statuses and timeouts."""
    try:
        await client.get(f"{API}/posts/9999999")
    except HTTPStatusError as e:
        logger.info(f"Expected failure: {e} (data: {e.response.data})")

    try:
        await client.get(f"{API}/posts", timeout=0.001)
    except TimeoutError as e:
        logger.info(f"Expected timeout: {e}")


async def main():
    """Run all examples."""
    logger.info("Starting simple_http_client examples...")
    client = HttpClient(timeout=10.0)

    try:
        await crud_requests(client)
        await configuration(client)
        await concurrent_requests(client)
        await error_handling(client)
    except RequestError as e:
        logger.error(f"Example failed: {e}")
        if e.response is not None:
            logger.error(f"Status: {e.response.status}, data: {e.response.data}")
        raise

    logger.info("All examples completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
