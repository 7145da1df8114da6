import logging

from linksnap.types import LambdaEvent, LambdaContext, LambdaResponse
from linksnap.exceptions import ConfigurationError
from linksnap.dao.exceptions import LinkNotFoundError, DataStoreError
from linksnap.services import ClickRecorder, RedirectResolver
from linksnap.utils import load_config, get_short_url, guarantee_500_response, ShortenerSettings
from linksnap.lambdas.dependencies import make_link_dao, make_analytics_client
from linksnap.lambdas.responses import response_302, response_400, response_404, response_500
from linksnap.lambdas.redirect_url.constants import (
    MISSING_ALIAS,
    LINK_NOT_FOUND,
    STORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def click_context(event: LambdaEvent) -> dict:
    """Collect request details attached to the `link_clicked` analytics event"""
    headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
    identity = (event.get('requestContext') or {}).get('identity') or {}
    # fmt: off
    return {
        key: value for key, value in {
            'referrer': headers.get('referer'),
            'user_agent': headers.get('user-agent'),
            'source_ip': identity.get('sourceIp'),
        }.items() if value
    }
    # fmt: on


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract alias from request path
    - Step 2: Look up the link and record the click
    - Step 3: Redirect client to the original URL

    A failure to record the click is logged and never blocks the redirect.

    HTTP responses:
        302: Successful redirect
            headers:
                Location: original URL
        400: Bad client request
            message: missing alias in path parameters
        404: Not found
            errorCode: NotFound (alias does not exist)
        500: Internal server error
            errorCode: StoreUnavailable (lookup failed)

    Args:
        event (dict):
            API Gateway event payload containing the alias path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'alias': 'ab12cd'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
        settings = ShortenerSettings.from_config(app_config)
    except ConfigurationError as e:
        logger.exception('Failed to load configuration for redirect URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=e.error_code)

    # 1- Extract alias from request's path
    alias = (event.get('pathParameters') or {}).get('alias')
    if not alias:
        logger.info('Missing "alias" in path. Responding with 400.', extra={'event': MISSING_ALIAS})
        return response_400(message="missing 'alias' in path")
    logger.debug('Client requested short URL %s.', get_short_url(alias, event, base=settings.base_url))

    # 2- Resolve the link, recording the click on the way
    try:
        dao = make_link_dao(app_config)
        recorder = ClickRecorder(dao, analytics=make_analytics_client(), max_attempts=settings.click_max_attempts)
        original_url = RedirectResolver(dao, recorder).resolve(alias, **click_context(event))
    except LinkNotFoundError as e:
        logger.info('Link not found in database. Responding with 404.', extra={'alias': alias, 'event': LINK_NOT_FOUND})
        return response_404(message=f"short url {get_short_url(alias, event, base=settings.base_url)} doesn't exist", error_code=e.error_code)
    except DataStoreError as e:
        logger.error('Data store unavailable. Responding with 500.', extra={'alias': alias, 'event': STORE_UNAVAILABLE, 'reason': str(e)})
        return response_500(message='data store unavailable, please retry', error_code=e.error_code)

    # 3- Redirect client to original URL
    logger.info('Redirecting client to original URL. Responding with 302.', extra={'alias': alias, 'event': REDIRECT_SUCCESS})
    return response_302(location=original_url)
