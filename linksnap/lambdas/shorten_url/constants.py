# Log event codes
INVALID_REQUEST_BODY = 'INVALID_REQUEST_BODY'
INVALID_URL = 'INVALID_URL'
INVALID_ALIAS = 'INVALID_ALIAS'
ALIAS_TAKEN = 'ALIAS_TAKEN'
GENERATION_EXHAUSTED = 'GENERATION_EXHAUSTED'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
LINK_CREATED = 'LINK_CREATED'
