"""
Infrastructure shared by the services: settings, logging, the SQLite
key-value store, the identity provider and request authentication.
"""
