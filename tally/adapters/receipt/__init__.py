"""Receipt adapters.

Implement OrderSinkPort by rendering submitted orders for people.
"""
