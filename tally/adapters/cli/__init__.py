"""Command-line interface adapters.

Provides CLI commands for working on a draft order:
- add / custom / update / remove: Edit lines
- adjust: Set order discount, tax and shipping
- pay / submit: Settle and hand over the order
- stock: Value a stock adjustment
"""
