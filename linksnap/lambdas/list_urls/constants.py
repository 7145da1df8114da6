# Log event codes
INVALID_LIMIT = 'INVALID_LIMIT'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
LIST_SUCCESS = 'LIST_SUCCESS'
