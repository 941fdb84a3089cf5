"""
Storefront API

E-commerce backend: account registration and token authentication, a
seller-managed product catalog, per-user shopping carts and checkout into
orders with price snapshots.
"""

__version__ = "1.0.0"
__author__ = "Storefront Team"
