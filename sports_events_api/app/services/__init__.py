"""
Service layer.

Each module defines the handlers for one domain and the actions built
from them with ``core.actions.create_action``.  Callers (the HTTP
endpoints, scripts, tests) invoke the actions, never the handlers.
"""
