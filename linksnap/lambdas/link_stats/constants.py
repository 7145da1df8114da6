# Log event codes
MISSING_ALIAS = 'MISSING_ALIAS'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
STATS_SUCCESS = 'STATS_SUCCESS'
