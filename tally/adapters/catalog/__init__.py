"""Catalog adapters.

Provide CatalogPort implementations that resolve a product into the
price and tax used to default a new line.
"""
