"""Cache accessor over memcache client.

:Classes: Cache

Values are stored on memcache servers by python-memcached client. Any other
client with the same interface (``get``, ``set``, ``replace``, ``delete``
with ``time`` argument) could be used instead.
"""
from logging import getLogger
from typing import Iterable, Optional

import memcache  # type: ignore

log = getLogger("poormvc")

DEFAULT_EXPIRES = 600
DEFAULT_PORT = 11211


def server_address(host: str, port: Optional[int] = None):
    """Return ``host:port`` server address.

    >>> server_address('127.0.0.1')
    '127.0.0.1:11211'
    >>> server_address('cache.local:11311')
    'cache.local:11311'
    """
    if port is None:
        if ':' in host:
            return host
        port = DEFAULT_PORT
    return "%s:%d" % (host, int(port))


class Cache:
    """Cache with empty keys check.

    .. code:: python

        cache = Cache()
        cache.add_server('127.0.0.1', 11211)
        cache.set('categories', categories, 3600)
        cache.get('categories')
    """

    def __init__(self, client=None):
        self.__servers = []
        self.__client = client if client is not None \
            else memcache.Client(self.__servers)

    @property
    def client(self):
        return self.__client

    @property
    def servers(self):
        """Tuple of server addresses added by add_server."""
        return tuple(self.__servers)

    def add_server(self, host: str, port: Optional[int] = None):
        """Add memcache server to client, known address is skipped."""
        address = server_address(host, port)
        if address in self.__servers:
            return
        self.__servers.append(address)
        self.__client.set_servers(self.__servers)
        log.info("Cache server %s added", address)

    def add_servers(self, addresses: Iterable[str]):
        """Add servers from ``host[:port]`` addresses."""
        for address in addresses:
            self.add_server(address)

    def get(self, key):
        """Return value or None, if key is empty or not found."""
        if not key:
            return None
        return self.__client.get(key)

    def set(self, key, value, expires: int = DEFAULT_EXPIRES):
        """Store value, existing key is replaced. Return True on success."""
        if not key:
            return False
        if self.__client.replace(key, value, time=expires):
            return True
        if self.__client.set(key, value, time=expires):
            return True
        log.warning("Cache set for %s failed", key)
        return False

    def delete(self, key):
        """Remove key, return False if key is empty or not found."""
        if not key:
            return False
        return bool(self.__client.delete(key))
