"""
Endpoint modules for API v1, one ``APIRouter`` per domain.  They are
aggregated in ``router.py``.
"""
