"""Input validation for the shortening API.

Functions:
    validate_url(url) -> str
        Ensure a URL is an absolute http(s) URL and return it unmodified.

Example:
    >>> validate_url('https://example.com/page?q=1')
    'https://example.com/page?q=1'
    >>> validate_url('example.com')
    Traceback (most recent call last):
        ...
    linksnap.exceptions.InvalidUrlError: URL must start with http:// or https:// (given: 'example.com').
"""

import urllib.parse

from linksnap.exceptions import InvalidUrlError


ALLOWED_SCHEMES = frozenset({'http', 'https'})
MAX_URL_LENGTH = 2048


def validate_url(url: object) -> str:
    """Validate that `url` is a syntactically valid absolute http(s) URL

    The URL is returned exactly as given: no normalization, no scheme guessing.

    Args:
        url (object):
            Candidate URL, usually straight from a JSON request body.

    Returns:
        str: the same URL.

    Raises:
        InvalidUrlError:
            If the value is not a string, is empty, too long, contains
            whitespace, has no http(s) scheme or has no host.
    """
    if not isinstance(url, str) or not url:
        raise InvalidUrlError('URL must be a non-empty string.')
    if len(url) > MAX_URL_LENGTH:
        raise InvalidUrlError(f'URL must be at most {MAX_URL_LENGTH} characters long.')
    if any(char.isspace() for char in url):
        raise InvalidUrlError('URL must not contain whitespace.')

    try:
        components = urllib.parse.urlsplit(url)
        # Accessing the port validates it (raises ValueError when out of range)
        components.port
    except ValueError as e:
        raise InvalidUrlError(f'URL is malformed (given: {url!r}).') from e

    if components.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(f'URL must start with http:// or https:// (given: {url!r}).')
    if not components.hostname:
        raise InvalidUrlError(f'URL must include a host (given: {url!r}).')

    return url
