"""Click recording on top of the Link Store's atomic hit counter.

The counter bump and the `last_clicked_at` update happen in a single Link Store
operation. Each call draws one idempotency token and reuses it on every retry,
so a retry after an unknown outcome (e.g. a timeout) never counts a click twice.
Analytics enrichment is best-effort and never fails the click.
"""

import uuid
import logging

from linksnap.constants import Defaults
from linksnap.models import LinkModel
from linksnap.dao.base import LinkBaseDAO
from linksnap.dao.exceptions import DataStoreError
from linksnap.services.analytics import AnalyticsClient, NullAnalyticsClient, LINK_CLICKED


logger = logging.getLogger(__name__)


class ClickRecorder:
    """Record clicks of short links.

    Attributes:
        dao (LinkBaseDAO):
            Link Store performing the atomic increment.
        analytics (AnalyticsClient):
            Sink for the `link_clicked` event.
        max_attempts (int):
            Attempts against the Link Store before giving up on DataStoreError.

    Example:
        >>> recorder = ClickRecorder(dao, analytics=LoggingAnalyticsClient())
        >>> recorder.record('ab12cd', referrer='https://news.example').click_count
        1
    """

    def __init__(
        self,
        dao: LinkBaseDAO,
        analytics: AnalyticsClient | None = None,
        max_attempts: int = Defaults.CLICK_MAX_ATTEMPTS,
    ):
        self.dao = dao
        self.analytics = analytics or NullAnalyticsClient()
        self.max_attempts = max(1, max_attempts)

    def record(self, alias: str, **context) -> LinkModel:
        """Count one click of `alias`.

        Args:
            alias (str):
                The clicked alias.
            **context:
                Request details forwarded to analytics (referrer, user agent, ...).

        Returns:
            LinkModel: the link right after the increment.

        Raises:
            LinkNotFoundError:
                If the alias does not exist (not retried).
            DataStoreError:
                If every attempt failed.
        """
        click_id = uuid.uuid4().hex

        for attempt in range(1, self.max_attempts + 1):
            try:
                link = self.dao.hit(alias, click_id=click_id)
                break
            except DataStoreError:
                if attempt == self.max_attempts:
                    raise
                logger.warning(
                    'Failed to record click, retrying.',
                    extra={'alias': alias, 'clickId': click_id, 'attempt': attempt},
                )

        self._track_clicked(link, **context)
        return link

    def _track_clicked(self, link: LinkModel, **context) -> None:
        try:
            self.analytics.track(LINK_CLICKED, alias=link.alias, click_count=link.click_count, **context)
        except Exception:
            logger.warning('Failed to track link click.', exc_info=True, extra={'alias': link.alias})
