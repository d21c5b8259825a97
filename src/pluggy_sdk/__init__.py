"""
Pluggy API client for Python.

Connect end users to financial institutions through Pluggy and read their
accounts, transactions and investments as typed objects.
"""

__version__ = "0.1.0"
