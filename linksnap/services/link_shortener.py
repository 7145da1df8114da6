"""Create flow for new short links.

Validates the request, walks the alias candidates and lets the Link Store
decide uniqueness atomically on insertion.
"""

import logging

from linksnap.models import LinkModel
from linksnap.dao.base import LinkBaseDAO
from linksnap.dao.exceptions import LinkAlreadyExistsError
from linksnap.exceptions import AliasTakenError, GenerationExhaustedError
from linksnap.services.alias_generator import AliasGenerator
from linksnap.services.analytics import AnalyticsClient, NullAnalyticsClient, LINK_CREATED
from linksnap.utils.validators import validate_url


logger = logging.getLogger(__name__)


class LinkShortener:
    """Shorten URLs into new links.

    Example:
        >>> shortener = LinkShortener(dao, AliasGenerator(length=6))
        >>> shortener.shorten('https://example.com/page').alias
        'ab12cd'
        >>> shortener.shorten('https://example.com/page', custom_alias='ab12cd')
        Traceback (most recent call last):
            ...
        linksnap.exceptions.AliasTakenError: Alias 'ab12cd' is already taken.
    """

    def __init__(self, dao: LinkBaseDAO, generator: AliasGenerator, analytics: AnalyticsClient | None = None):
        self.dao = dao
        self.generator = generator
        self.analytics = analytics or NullAnalyticsClient()

    def shorten(self, original_url: str, custom_alias: str | None = None) -> LinkModel:
        """Create a link for `original_url`.

        Raises:
            InvalidUrlError:
                If `original_url` is not an absolute http(s) URL (nothing is stored).
            AliasInvalidError:
                If `custom_alias` is malformed or reserved (nothing is stored).
            AliasTakenError:
                If `custom_alias` already belongs to another link.
            GenerationExhaustedError:
                If every random candidate collided with an existing link.
            DataStoreError:
                If the Link Store is unavailable.
        """
        validate_url(original_url)

        attempts = 0
        for alias in self.generator.candidates(custom_alias):
            attempts += 1
            try:
                link = self.dao.create(alias, original_url)
            except LinkAlreadyExistsError as e:
                if custom_alias is not None:
                    raise AliasTakenError(f'Alias {alias!r} is already taken.') from e
                logger.warning('Generated alias collided with an existing link.', extra={'alias': alias, 'attempt': attempts})
                continue

            self._track_created(link)
            return link

        raise GenerationExhaustedError(f'Could not find a free alias after {attempts} attempts.')

    def _track_created(self, link: LinkModel) -> None:
        try:
            self.analytics.track(LINK_CREATED, alias=link.alias, original_url=link.original_url)
        except Exception:
            logger.warning('Failed to track link creation.', exc_info=True, extra={'alias': link.alias})
