"""Abstract base class for Link data access objects (DAOs).

This class establishes a consistent contract for all Link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Provide an interface for creating, retrieving and hitting LinkModel objects.
    - Standardize error handling across multiple data store implementations.
    - Enforce a consistent API for use by the services and Lambda functions.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linksnap.dao.redis import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)

        >>> link = dao.create("a1b2c3", "https://example.com/blog/article-123")
        >>> link.click_count
        0

        >>> dao.hit("a1b2c3").click_count
        1

        >>> print(dao.get("a1b2c3").original_url)
        https://example.com/blog/article-123
"""

from abc import ABC, abstractmethod

from linksnap.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for Link data access objects (DAOs).

    Methods:
        create(alias: str, original_url: str, **kwargs) -> LinkModel:
            Atomically create a new link.
            Raises LinkAlreadyExistsError if the alias already exists.
            Raises DataStoreError on connection or write failure.

        get(alias: str, **kwargs) -> LinkModel:
            Retrieve a link by alias.
            Raises LinkNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        hit(alias: str, click_id: str | None = None, **kwargs) -> LinkModel:
            Atomically increment the click counter and return the updated link.
            Raises LinkNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or write failure.

        recent(limit: int, **kwargs) -> list[LinkModel]:
            Return the most recently created links, newest first.

        count(**kwargs) -> int:
            Return the total number of links.

    Subclassing:
        Datastore-specific implementations (e.g., LinkRedisDAO) must extend this
        class and implement all abstract methods.

    NOTE:
        - Links are never deleted. The DAO does not provide a delete interface.
        - Implementations must never apply a global lock across unrelated aliases.
    """

    @abstractmethod
    def create(self, alias: str, original_url: str, **kwargs) -> LinkModel:
        """Create a new link in the data store.

        Exactly one of any number of concurrent calls for the same alias succeeds.

        Args:
            alias (str):
                The alias of the new link.

            original_url (str):
                The already validated destination URL.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: the stored link with a zero click count.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same alias already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, alias: str, **kwargs) -> LinkModel:
        """Retrieve a link from the data store by its alias.

        Args:
            alias (str):
                The alias of the link to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: a consistent snapshot of the link.

        Raises:
            LinkNotFoundError:
                If no link with the given alias exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, alias: str, click_id: str | None = None, **kwargs) -> LinkModel:
        """Record one click: increment the counter and stamp the click time.

        Args:
            alias (str):
                The alias of the clicked link.

            click_id (str | None):
                Optional idempotency token. Repeated calls with the same token
                count the click only once.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: the link as it is right after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given alias exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def recent(self, limit: int = 20, **kwargs) -> list[LinkModel]:
        """Retrieve the most recently created links, newest first.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count(self, **kwargs) -> int:
        """Retrieve the total number of links in the data store.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
