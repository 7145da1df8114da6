import logging

from linksnap.types import LambdaEvent, LambdaContext, LambdaResponse
from linksnap.constants import Defaults, BAD_REQUEST
from linksnap.exceptions import ConfigurationError
from linksnap.dao.exceptions import DataStoreError
from linksnap.utils import load_config, get_short_url, isoformat, guarantee_500_response, ShortenerSettings
from linksnap.lambdas.dependencies import make_link_dao
from linksnap.lambdas.responses import response_200, response_400, response_500
from linksnap.lambdas.list_urls.constants import (
    INVALID_LIMIT,
    STORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    LIST_SUCCESS,
)


logger = logging.getLogger(__name__)


def parse_limit(event: LambdaEvent) -> int:
    """Read the `limit` query parameter (1-100, default 20)

    Raises:
        ValueError: If `limit` is not an integer within bounds.
    """
    raw = (event.get('queryStringParameters') or {}).get('limit')
    if raw is None or raw == '':
        return Defaults.RECENT_LINKS_LIMIT

    limit = int(raw)
    if not 1 <= limit <= Defaults.RECENT_LINKS_MAX_LIMIT:
        raise ValueError(f'limit must be between 1 and {Defaults.RECENT_LINKS_MAX_LIMIT}')
    return limit


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests listing the most recent links

    HTTP responses:
        200: Recent links, newest first
            count: total number of links
            links: [{alias, originalUrl, shortenedUrl, clickCount, createdAt, lastClickedAt}, ...]
        400: Bad client request
            message: invalid `limit` query parameter
        500: Internal server error
            errorCode: StoreUnavailable

    Example:
        >>> event = {'queryStringParameters': {'limit': '2'}}
        >>> body = json.loads(lambda_handler(event, None)['body'])
        >>> body['count'], len(body['links'])
        (12, 2)
    """
    try:
        app_config = load_config('list_urls')
        settings = ShortenerSettings.from_config(app_config)
    except ConfigurationError as e:
        logger.exception('Failed to load configuration for list URLs function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=e.error_code)

    try:
        limit = parse_limit(event)
    except ValueError:
        logger.info('Invalid "limit" query parameter. Responding with 400.', extra={'event': INVALID_LIMIT})
        return response_400(
            message=f"'limit' must be an integer between 1 and {Defaults.RECENT_LINKS_MAX_LIMIT}",
            error_code=BAD_REQUEST,
        )

    try:
        dao = make_link_dao(app_config)
        links = dao.recent(limit)
        total = dao.count()
    except DataStoreError as e:
        logger.error('Data store unavailable. Responding with 500.', extra={'event': STORE_UNAVAILABLE, 'reason': str(e)})
        return response_500(message='data store unavailable, please retry', error_code=e.error_code)

    logger.info('Listing recent links. Responding with 200.', extra={'event': LIST_SUCCESS, 'limit': limit, 'returned': len(links)})
    return response_200(
        {
            'count': total,
            'links': [
                {
                    'alias': link.alias,
                    'originalUrl': link.original_url,
                    'shortenedUrl': get_short_url(link.alias, event, base=settings.base_url),
                    'clickCount': link.click_count,
                    'createdAt': isoformat(link.created_at),
                    'lastClickedAt': isoformat(link.last_clicked_at),
                }
                for link in links
            ],
        }
    )
