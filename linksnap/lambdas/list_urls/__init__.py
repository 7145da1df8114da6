from linksnap.utils import initialize_logging


initialize_logging()
