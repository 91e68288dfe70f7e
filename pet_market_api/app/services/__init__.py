"""
Service layer.

Each service encapsulates the business logic for one kind of entity in
the key-value namespace.  Services receive the caller's profile as an
explicit argument and raise ``core.errors.ServiceError`` subclasses;
they never touch HTTP objects.
"""
