"""
Pydantic schema definitions for API payloads.

Listings are free-form JSON objects and have no schema here; users and
messages do.
"""
