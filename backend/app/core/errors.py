from __future__ import annotations


class UserServiceError(Exception):
    """Base class for errors raised by the user store and service."""


class InvalidDate(UserServiceError):
    """A date of birth was not a ``YYYY-MM-DD`` calendar date."""


class NotFound(UserServiceError):
    """No user exists with the requested id."""


class StorageError(UserServiceError):
    """The database rejected a statement or could not be reached.

    The message is safe to log; it is never sent to API clients.
    """
