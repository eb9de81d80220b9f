from .settings import *  # noqa: F401,F403

DEBUG = False

# SQLite by default. TEST_USE_CONFIGURED_DB=True runs against the DB_* database
# (MySQL), which row-locking tests need.
if not env.bool('TEST_USE_CONFIGURED_DB', default=False):  # noqa: F405
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'level': 'WARNING',
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}
