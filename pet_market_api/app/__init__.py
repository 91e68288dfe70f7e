"""
Application package initializer.

The service is organised by layer: ``core`` holds configuration,
storage, identity and authentication helpers; ``services`` holds the
business logic for listings, conversations, analytics and users;
``schemas`` holds the Pydantic request/response models; and ``api``
holds the versioned FastAPI routers.
"""

from .main import app  # noqa: F401
