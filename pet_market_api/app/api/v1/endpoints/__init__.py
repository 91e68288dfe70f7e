"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one domain (auth, pets, messages,
conversations, admin).  The routers are aggregated in ``router.py``.
"""
