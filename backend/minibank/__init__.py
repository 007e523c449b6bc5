"""minibank: users, accounts and atomic money transfers over HTTP."""

__version__ = "0.1.0"
