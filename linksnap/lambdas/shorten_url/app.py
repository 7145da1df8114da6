import json
import base64
import binascii
import logging

from linksnap.types import LambdaEvent, LambdaContext, LambdaResponse
from linksnap.constants import BAD_REQUEST
from linksnap.exceptions import (
    ConfigurationError,
    InvalidUrlError,
    AliasInvalidError,
    AliasTakenError,
    GenerationExhaustedError,
)
from linksnap.dao.exceptions import DataStoreError
from linksnap.services import AliasGenerator, LinkShortener, validate_alias
from linksnap.utils import load_config, get_short_url, isoformat, guarantee_500_response, validate_url, ShortenerSettings
from linksnap.lambdas.dependencies import make_link_dao, make_analytics_client
from linksnap.lambdas.responses import response_201, response_400, response_409, response_500
from linksnap.lambdas.shorten_url.constants import (
    INVALID_REQUEST_BODY,
    INVALID_URL,
    INVALID_ALIAS,
    ALIAS_TAKEN,
    GENERATION_EXHAUSTED,
    STORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    LINK_CREATED,
)


logger = logging.getLogger(__name__)


def parse_body(event: LambdaEvent) -> dict:
    """Decode the JSON object carried by an API Gateway proxy event

    Raises:
        ValueError: If the body is not valid (base64 encoded) JSON or not a JSON object.
    """
    raw = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        try:
            raw = base64.b64decode(raw).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError('invalid base64 body') from e

    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError('invalid JSON body') from e

    if not isinstance(body, dict):
        raise ValueError('JSON body must be an object')
    return body


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Parse `url` and optional `alias` from the JSON request body
    - Step 2: Validate the URL and the custom alias, if any
    - Step 3: Walk alias candidates and atomically create the link in the data store
    - Step 4: Respond with 201 and the full short URL

    HTTP responses:
        201: Link created
            alias: the link's alias
            shortenedUrl: full short URL
            createdAt: ISO-8601 creation timestamp
        400: Bad client request
            errorCode: BadRequest (unreadable body), InvalidUrl or AliasInvalid
        409: Conflict
            errorCode: AliasTaken (custom alias already in use)
        500: Internal server error
            errorCode: GenerationExhausted or StoreUnavailable (both safe to retry)

    Args:
        event (dict):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"url": "https://example.com/page"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['shortenedUrl']
        'https://short.example/ab12cd'
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
        settings = ShortenerSettings.from_config(app_config)
    except ConfigurationError as e:
        logger.exception('Failed to load configuration for shorten URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(error_code=e.error_code)

    # 1- Parse request body
    try:
        body = parse_body(event)
    except ValueError as e:
        logger.info('Unreadable request body. Responding with 400.', extra={'event': INVALID_REQUEST_BODY, 'reason': str(e)})
        return response_400(message=str(e), error_code=BAD_REQUEST)

    original_url = body.get('url')
    custom_alias = body.get('alias')

    # 2- Validate input before the data store is touched
    try:
        validate_url(original_url)
        if custom_alias is not None:
            validate_alias(custom_alias)
    except InvalidUrlError as e:
        logger.info('Invalid URL. Responding with 400.', extra={'event': INVALID_URL, 'reason': str(e)})
        return response_400(message=str(e), error_code=e.error_code)
    except AliasInvalidError as e:
        logger.info('Invalid custom alias. Responding with 400.', extra={'event': INVALID_ALIAS, 'reason': str(e)})
        return response_400(message=str(e), error_code=e.error_code)

    # 3- Create the link
    try:
        shortener = LinkShortener(
            dao=make_link_dao(app_config),
            generator=AliasGenerator(length=settings.alias_length, max_attempts=settings.alias_max_attempts),
            analytics=make_analytics_client(),
        )
        link = shortener.shorten(original_url, custom_alias=custom_alias)
    except AliasTakenError as e:
        logger.info('Custom alias already taken. Responding with 409.', extra={'alias': custom_alias, 'event': ALIAS_TAKEN})
        return response_409(message=str(e), error_code=e.error_code)
    except GenerationExhaustedError as e:
        logger.error('Alias generation exhausted. Responding with 500.', extra={'event': GENERATION_EXHAUSTED, 'reason': str(e)})
        return response_500(message='could not allocate an alias, please retry', error_code=e.error_code)
    except DataStoreError as e:
        logger.error('Data store unavailable. Responding with 500.', extra={'event': STORE_UNAVAILABLE, 'reason': str(e)})
        return response_500(message='data store unavailable, please retry', error_code=e.error_code)

    # 4- Respond with the new short URL
    short_url = get_short_url(link.alias, event, base=settings.base_url)
    logger.info(
        'Link created. Responding with 201.',
        extra={'alias': link.alias, 'event': LINK_CREATED},
    )
    return response_201(
        {
            'alias': link.alias,
            'shortenedUrl': short_url,
            'createdAt': isoformat(link.created_at),
        },
        location=short_url,
    )
