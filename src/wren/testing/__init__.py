"""Testing utilities for wren applications.

Usage::

    from wren.testing import TestClient

    async with TestClient(app) as client:
        response = await client.get("/")
        assert response.status == 200
"""

from wren.testing.client import TestClient, basic_auth, multipart_body

__all__ = ["TestClient", "basic_auth", "multipart_body"]
