"""External adapters for the Tally pricing system.

This package contains everything that talks to the outside world and
provides implementations of the core port interfaces.

Adapter Organization:

- catalog/: Product lookup used to default new lines (in-memory, JSON file)
- receipt/: Output for submitted orders (stdout receipt)
- forms/: Mappers between screen form payloads and core orders
- cli/: Command-line interface for editing a draft order
"""
