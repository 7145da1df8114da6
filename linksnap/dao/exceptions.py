"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a LinkModel is not found in the data store.

    LinkAlreadyExistsError:
        Raised when creating a LinkModel whose alias is already taken.

    DataStoreError:
        Raised when the data store is unreachable or rejects a command (read-only replica, OOM).

    StoreTimeoutError:
        Raised when a data store call exceeds its timeout.

Example:
    >>> from linksnap.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with alias 'ab12cd' not found.")
    Traceback (most recent call last):
        ...
    linksnap.dao.exceptions.LinkNotFoundError: Link with alias 'ab12cd' not found.
"""

from linksnap.exceptions import LinkSnapError


class DAOError(LinkSnapError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'DAOError'


class LinkNotFoundError(DAOError):
    """Raised when a LinkModel is not found in the data store."""

    error_code = 'NotFound'


class LinkAlreadyExistsError(DAOError):
    """Raised when creating a LinkModel whose alias already exists in the data store.

    Internal only: LinkShortener turns it into AliasTakenError for custom
    aliases or into a retry for generated ones, so this code never reaches a
    response body.
    """

    error_code = 'DuplicateAlias'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues and out-of-memory failures.
    """

    error_code = 'StoreUnavailable'


class StoreTimeoutError(DataStoreError):
    """Raised when a data store call does not complete within its timeout."""

    error_code = 'StoreUnavailable'
