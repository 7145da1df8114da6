"""API Gateway proxy responses shared by the Lambda handlers.

Error bodies always carry a human readable `message` and a machine readable
`errorCode`:

    {"message": "Bad Request (missing 'url' in JSON body)", "errorCode": "BadRequest"}
"""

import json
from typing import Any

from linksnap.types import LambdaResponse, HttpHeaders


JSON_HEADERS: HttpHeaders = {'Content-Type': 'application/json'}


def _response(status_code: int, body: dict[str, Any], headers: HttpHeaders | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error(status_code: int, base: str, message: str | None, error_code: str) -> LambdaResponse:
    body = {'message': base if not message else f'{base} ({message})', 'errorCode': error_code}
    return _response(status_code, body)


def response_200(body: dict[str, Any]) -> LambdaResponse:
    return _response(200, body)


def response_201(body: dict[str, Any], *, location: str | None = None) -> LambdaResponse:
    return _response(201, body, {'Location': location} if location else None)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
            'Cache-Control': 'no-store',  # every redirect must reach the click counter
        },
        'body': '',
    }


def response_400(message: str | None = None, error_code: str = 'BadRequest') -> LambdaResponse:
    return _error(400, 'Bad Request', message, error_code)


def response_404(message: str | None = None, error_code: str = 'NotFound') -> LambdaResponse:
    return _error(404, 'Not Found', message, error_code)


def response_409(message: str | None = None, error_code: str = 'Conflict') -> LambdaResponse:
    return _error(409, 'Conflict', message, error_code)


def response_500(message: str | None = None, error_code: str = 'InternalError') -> LambdaResponse:
    return _error(500, 'Internal Server Error', message, error_code)
