"""Alias generation utility

This module validates user-supplied aliases and synthesizes random base62
aliases. It performs no I/O: uniqueness is enforced by the Link Store when a
candidate is inserted, never by checking ahead of time.

Functions:
    generate_alias(length=7) -> str:
        Draw a random base62 alias.
    validate_alias(alias) -> str:
        Ensure a custom alias uses the allowed charset and length.

Classes:
    AliasGenerator:
        Yield the alias candidates for one shorten request.

Example:
    >>> from linksnap.services import AliasGenerator
    >>> generator = AliasGenerator(length=7, max_attempts=5)
    >>> list(generator.candidates('my-link'))
    ['my-link']
    >>> len(list(generator.candidates()))
    5
"""

import re
import secrets
import string
from collections.abc import Iterator

from linksnap.constants import AliasRules, Defaults
from linksnap.exceptions import AliasInvalidError, BadConfigurationError


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

CUSTOM_ALIAS_PATTERN = re.compile(
    rf'^[A-Za-z0-9_-]{{{AliasRules.CUSTOM_MIN_LENGTH},{AliasRules.CUSTOM_MAX_LENGTH}}}$'
)


def generate_alias(length: int = Defaults.ALIAS_LENGTH) -> str:
    """Generate a random base62 alias.

    Uses the `secrets` CSPRNG so aliases are not guessable from one another.
    With the default length of 7 the alias space holds 62^7 (about 3.5e12)
    values, which keeps collisions rare enough for a handful of retries.

    Args:
        length (int, optional):
            Number of characters. Defaults to 7.

    Returns:
        str: the alias, e.g. 'Gh71TCN'.
    """
    if not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def validate_alias(alias: object) -> str:
    """Validate a user-supplied alias.

    Allowed: letters, digits, '-' and '_', 3 to 32 characters, and not one of
    the reserved route words (e.g. 'api').

    Returns:
        str: the alias, unmodified.

    Raises:
        AliasInvalidError:
            If the alias is not a string, breaks the charset/length rule or is reserved.
    """
    if not isinstance(alias, str) or not CUSTOM_ALIAS_PATTERN.fullmatch(alias):
        raise AliasInvalidError(
            f'Alias must be {AliasRules.CUSTOM_MIN_LENGTH}-{AliasRules.CUSTOM_MAX_LENGTH} characters '
            f"of letters, digits, '-' or '_' (given: {alias!r})."
        )
    if alias.lower() in AliasRules.RESERVED:
        raise AliasInvalidError(f'Alias {alias!r} is reserved.')
    return alias


class AliasGenerator:
    """Produce alias candidates for a shorten request.

    Attributes:
        length (int):
            Length of generated aliases.
        max_attempts (int):
            Number of random candidates offered before the caller gives up.
    """

    def __init__(self, length: int = Defaults.ALIAS_LENGTH, max_attempts: int = Defaults.ALIAS_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise BadConfigurationError(f'max_attempts must be at least 1 (given value: {max_attempts}).')

        self.length = length
        self.max_attempts = max_attempts

    def candidates(self, custom_alias: str | None = None) -> Iterator[str]:
        """Yield alias candidates in the order they should be tried.

        A custom alias is validated and offered exactly once. Without one,
        up to `max_attempts` random aliases are offered; the caller moves on to
        the next candidate whenever the store reports a collision.

        Raises:
            AliasInvalidError:
                If `custom_alias` is malformed or reserved (raised before anything is yielded).
        """
        if custom_alias is not None:
            yield validate_alias(custom_alias)
            return

        for _ in range(self.max_attempts):
            yield generate_alias(self.length)
