"""
Versioned HTTP routes.

Each version subpackage (currently only ``v1``) exposes a ``router``
that ``main.create_app`` mounts under ``/api/<version>``.
"""
