"""Test utilities for bundleserve applications.

    from bundleserve.testing import TestClient
"""

from bundleserve.testing.client import TestClient

__all__ = ["TestClient"]
