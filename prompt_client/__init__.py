"""
Prompt Gallery client.

HTTP client for the prompt service, a local vote ledger, the browsing feed
that ties them together, and a command-line front end.
"""

__version__ = "0.1.0"
