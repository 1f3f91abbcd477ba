"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeCatalogPort: In-memory catalog with call tracking
- FakeOrderSinkPort: Captured submitted orders for assertion
"""

from .catalog import FakeCatalogPort
from .sink import FakeOrderSinkPort

__all__ = [
    "FakeCatalogPort",
    "FakeOrderSinkPort",
]
