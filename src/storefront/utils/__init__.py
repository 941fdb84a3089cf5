"""
Shared utilities: logging, configuration, exceptions, transactions.
"""
