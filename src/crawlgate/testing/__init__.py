"""Test utilities for crawlgate gateways.

    from crawlgate.testing import TestClient
"""

from crawlgate.testing.client import TestClient

__all__ = ["TestClient"]
