"""
Postfeed application core.

Fetch-state controllers over the public posts API, a local credential store
and the FastAPI app (``postfeed.main:app``) that serves them to the screens.
"""

__version__ = "0.1.0"
