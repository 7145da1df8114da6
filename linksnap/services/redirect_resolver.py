import logging

from linksnap.dao.base import LinkBaseDAO
from linksnap.dao.exceptions import DAOError
from linksnap.services.click_recorder import ClickRecorder


logger = logging.getLogger(__name__)


# Log event codes
CLICK_RECORD_FAILED = 'CLICK_RECORD_FAILED'


class RedirectResolver:
    """Resolve aliases to their original URLs, recording a click on the way.

    The click is recorded synchronously but never at the expense of the
    redirect: a failed record is logged and the destination is still returned.
    Every Link Store call is bounded by the store timeout, so resolution never
    hangs on analytics.
    """

    def __init__(self, dao: LinkBaseDAO, recorder: ClickRecorder):
        self.dao = dao
        self.recorder = recorder

    def resolve(self, alias: str, **context) -> str:
        """Return the original URL of `alias`.

        Raises:
            LinkNotFoundError:
                If the alias does not exist (no click is recorded).
            DataStoreError:
                If the lookup itself fails.
        """
        link = self.dao.get(alias)

        try:
            self.recorder.record(alias, **context)
        except DAOError as e:
            logger.error(
                'Failed to record click. Redirecting anyway.',
                extra={'alias': alias, 'event': CLICK_RECORD_FAILED, 'error': e.__class__.__name__, 'reason': str(e)},
            )

        return link.original_url
