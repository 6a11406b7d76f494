"""Environment detection and per environment configuration.

:Exceptions: ConfigError
:Classes:    Config
:Functions:  detect_environment
"""
from logging import getLogger
from typing import Optional

from poormvc.state import ENV_LOCAL, ENV_DEVELOPMENT, ENV_STAGING, \
    ENV_PRODUCTION, ENVIRONMENTS

log = getLogger("poormvc")

# host substring: environment, checked in this order
HOST_PREFIXES = (
    ('local.', ENV_LOCAL),
    ('dev.', ENV_DEVELOPMENT),
    ('staging.', ENV_STAGING),
)

# built-in options for each environment
DEFAULTS = {
    ENV_LOCAL: {
        'debug': True,
    },
    ENV_DEVELOPMENT: {
        'debug': True,
    },
    ENV_STAGING: {
        'debug': False,
    },
    ENV_PRODUCTION: {
        'debug': False,
    },
}

COMMON_DEFAULTS = {
    'db_driver': 'sqlite3',
    'db_host': None,
    'db_user': None,
    'db_password': None,
    'db_name': None,
    'db_port': None,
    'log_queries': True,
    'retry_after': 60,
    'cache_servers': None,
}


class ConfigError(RuntimeError):
    """Invalid or missing configuration."""


def detect_environment(host: Optional[str]) -> Optional[str]:
    """Return environment name selected by host name substring.

    >>> detect_environment('local.example.net')
    'local'
    >>> detect_environment('www.example.net')
    'production'
    >>> detect_environment(None) is None
    True
    """
    if not host:
        return None
    for prefix, environment in HOST_PREFIXES:
        if prefix in host:
            return environment
    return ENV_PRODUCTION


def to_bool(value) -> bool:
    """Boolean from option value, which could be string from environ."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'on', 'yes', 'true')
    return bool(value)


class Config:
    """Configuration of one request environment.

    Options are layered: common defaults, environment defaults, options
    set by Application.set_config and ``app_`` variables from os.environ.

    .. code:: python

        config = Config('production', {'db_name': 'shop'})
        config.is_production    # True
        config.get('db_name')   # 'shop'
    """

    def __init__(self, environment: str, options: Optional[dict] = None,
                 debug: Optional[bool] = None):
        if environment not in ENVIRONMENTS:
            raise ConfigError("Unknown environment %s" % environment)
        self.__environment = environment
        self.__options = COMMON_DEFAULTS.copy()
        self.__options.update(DEFAULTS[environment])
        self.__options.update(options or {})
        self.__debug = debug

    @property
    def environment(self):
        """Environment name."""
        return self.__environment

    @property
    def is_local(self):
        return self.__environment == ENV_LOCAL

    @property
    def is_development(self):
        return self.__environment == ENV_DEVELOPMENT

    @property
    def is_staging(self):
        return self.__environment == ENV_STAGING

    @property
    def is_production(self):
        return self.__environment == ENV_PRODUCTION

    @property
    def debug(self):
        """Debug output (tracebacks, debug panel) is enabled.

        Set by ``poor_Debug`` variable, or enabled for local and development
        environment.
        """
        if self.__debug is not None:
            return self.__debug
        return to_bool(self.__options['debug'])

    @property
    def log_queries(self):
        return to_bool(self.__options['log_queries'])

    @property
    def retry_after(self):
        """Seconds for Retry-After header, when database is unavailable."""
        return int(self.__options['retry_after'])

    @property
    def cache_servers(self):
        """Tuple of memcache server addresses.

        Option could be list, or comma separated string from environ like
        ``app_cache_servers=10.0.0.1:11211,10.0.0.2``.
        """
        servers = self.__options['cache_servers'] or ()
        if isinstance(servers, str):
            servers = servers.split(',')
        return tuple(server.strip() for server in servers if server.strip())

    def get(self, key: str, default=None):
        """Return option value."""
        return self.__options.get(key, default)

    def options(self):
        """Copy of all options."""
        return self.__options.copy()

    def __repr__(self):
        return "<Config %s>" % self.__environment
