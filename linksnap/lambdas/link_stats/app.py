import logging

from linksnap.types import LambdaEvent, LambdaContext, LambdaResponse
from linksnap.exceptions import ConfigurationError
from linksnap.dao.exceptions import LinkNotFoundError, DataStoreError
from linksnap.utils import load_config, isoformat, guarantee_500_response
from linksnap.lambdas.dependencies import make_link_dao
from linksnap.lambdas.responses import response_200, response_400, response_404, response_500
from linksnap.lambdas.link_stats.constants import (
    MISSING_ALIAS,
    LINK_NOT_FOUND,
    STORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    STATS_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for link statistics

    Reads are a single point lookup; they never change the link.

    HTTP responses:
        200: Link statistics
            alias, clickCount, createdAt, lastClickedAt (null before the first click)
        400: Bad client request
            message: missing alias in path parameters
        404: Not found
            errorCode: NotFound
        500: Internal server error
            errorCode: StoreUnavailable

    Example:
        >>> event = {'pathParameters': {'alias': 'ab12cd'}}
        >>> json.loads(lambda_handler(event, None)['body'])
        {'alias': 'ab12cd', 'clickCount': 1, 'createdAt': '2025-10-15T12:00:00.000Z', 'lastClickedAt': '2025-10-15T12:05:00.000Z'}
    """
    try:
        app_config = load_config('link_stats')
    except ConfigurationError as e:
        logger.exception('Failed to load configuration for link stats function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=e.error_code)

    alias = (event.get('pathParameters') or {}).get('alias')
    if not alias:
        logger.info('Missing "alias" in path. Responding with 400.', extra={'event': MISSING_ALIAS})
        return response_400(message="missing 'alias' in path")

    try:
        link = make_link_dao(app_config).get(alias)
    except LinkNotFoundError as e:
        logger.info('Link not found in database. Responding with 404.', extra={'alias': alias, 'event': LINK_NOT_FOUND})
        return response_404(message=f"alias '{alias}' doesn't exist", error_code=e.error_code)
    except DataStoreError as e:
        logger.error('Data store unavailable. Responding with 500.', extra={'alias': alias, 'event': STORE_UNAVAILABLE, 'reason': str(e)})
        return response_500(message='data store unavailable, please retry', error_code=e.error_code)

    logger.info('Returning link statistics. Responding with 200.', extra={'alias': alias, 'event': STATS_SUCCESS})
    return response_200(
        {
            'alias': link.alias,
            'clickCount': link.click_count,
            'createdAt': isoformat(link.created_at),
            'lastClickedAt': isoformat(link.last_clicked_at),
        }
    )
