"""Test suite for the Tally pricing system.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - Catalog loading, receipt rendering, screen form mapping

3. fakes/: Port implementations for testing
   - In-memory implementations of CatalogPort and OrderSinkPort
"""
