from linksnap.services.analytics import AnalyticsClient, LoggingAnalyticsClient, NullAnalyticsClient
from linksnap.services.alias_generator import AliasGenerator, generate_alias, validate_alias
from linksnap.services.link_shortener import LinkShortener
from linksnap.services.click_recorder import ClickRecorder
from linksnap.services.redirect_resolver import RedirectResolver


__all__ = [
    'AnalyticsClient',
    'LoggingAnalyticsClient',
    'NullAnalyticsClient',
    'AliasGenerator',
    'generate_alias',
    'validate_alias',
    'LinkShortener',
    'ClickRecorder',
    'RedirectResolver',
]
