import logging.config

LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        },
    },
    'handlers': {
        'default': {
            'level': 'DEBUG',
            'formatter': 'standard',
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stdout',
        },
    },
    'loggers': {
        'resume_import': {
            'handlers': ['default'],
            'level': 'INFO',
            'propagate': False
        },
        # pdfminer is extremely chatty at DEBUG
        'pdfminer': {
            'level': 'WARNING',
            'propagate': True
        },
        'pdfplumber': {
            'level': 'WARNING',
            'propagate': True
        },
    }
}


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the service."""
    config = dict(LOGGING_CONFIG)
    config['loggers'] = dict(LOGGING_CONFIG['loggers'])
    config['loggers']['resume_import'] = dict(config['loggers']['resume_import'], level=level.upper())
    logging.config.dictConfig(config)
