"""
Application package.

``core`` holds configuration, logging, the database, security and the
action layer; ``schemas`` the pydantic payloads; ``services`` the
event, venue and authentication actions; ``api`` the versioned HTTP
routers that expose them.
"""

from .main import app  # noqa: F401
