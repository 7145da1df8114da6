from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LinkModel:
    """Represent one shortened URL and its click metadata.

    Attributes:
        alias (str):
            The unique short identifier that maps to the original URL.
        original_url (str):
            The absolute http(s) URL the alias redirects to. Never mutated.
        created_at (datetime):
            UTC creation time. Never mutated.
        click_count (int):
            Number of recorded redirects. Only ever increases.
        last_clicked_at (Optional[datetime]):
            UTC time of the latest recorded redirect, None until the first one.

    Example:
        >>> from datetime import datetime, UTC
        >>> link = LinkModel(
        ...     alias="ab12cd",
        ...     original_url="https://example.com/page",
        ...     created_at=datetime(2025, 10, 15, tzinfo=UTC),
        ... )
        >>> link.click_count
        0
        >>> link.last_clicked_at is None
        True
    """

    alias: str
    original_url: str
    created_at: datetime
    click_count: int = 0
    last_clicked_at: datetime | None = None
