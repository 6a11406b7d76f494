"""Url inspector, which reads url parts from WSGI environ.

:Classes: Url
"""
import re
from typing import Optional
from urllib.parse import quote

# simple regular expression for construct method
RE_HTTPURLPATTERN = re.compile(r"^(http|https):\/\/")


class Url:
    """Scheme, host, path and path parts of the current request.

    .. code:: python

        url = Url({'HTTP_HOST': 'example.net',
                   'REQUEST_URI': '/blog/2026?page=2'})
        url.path            # '/blog/2026'
        url.path_parts      # ['blog', '2026']
        url.url             # 'http://example.net/blog/2026?page=2'
    """

    def __init__(self, environ: dict):
        self.__environ = environ

    @property
    def scheme(self) -> str:
        """Request scheme, ``https`` or ``http``."""
        https = self.__environ.get('HTTPS')
        if https and https.lower() != 'off':
            return 'https'
        if self.__environ.get('wsgi.url_scheme') == 'https':
            return 'https'
        return 'http'

    @property
    def host(self) -> Optional[str]:
        """Host header value with port, or None if it is not set."""
        return self.__environ.get('HTTP_HOST') or None

    @property
    def hostname(self) -> Optional[str]:
        """Host without port."""
        host = self.host
        if host is None:
            return None
        return host.split(':')[0]

    @property
    def request_uri(self) -> str:
        """Request uri with query string as client sent it."""
        uri = self.__environ.get('REQUEST_URI')
        if uri is not None:
            return uri
        uri = quote(self.__environ.get('SCRIPT_NAME', '') +
                    (self.__decoded_path() or ''))
        query = self.__environ.get('QUERY_STRING')
        if query:
            uri += '?' + query
        return uri

    def __decoded_path(self):
        path = self.__environ.get('PATH_INFO')
        if path is None:
            return None
        # WSGI server sent path as latin-1 decoded bytes
        return path.encode('iso-8859-1').decode('utf-8', 'replace')

    @property
    def path(self) -> Optional[str]:
        """Path part of url without query string."""
        path = self.__decoded_path()
        if path is not None:
            return path
        uri = self.__environ.get('REQUEST_URI')
        if uri is None:
            return None
        return uri.split('?')[0]

    @property
    def path_parts(self):
        """List of path segments, None for root path."""
        path = self.path
        if path is None or path == '/':
            return None
        return path[1:].split('/')

    @property
    def url(self) -> str:
        """Full url of current request."""
        return "%s://%s%s" % (self.scheme, self.host or '', self.request_uri)

    def construct(self, path: str) -> str:
        """Return fully qualified url for path on the same host.

        Urls which contains scheme yet are returned untouched.
        """
        if RE_HTTPURLPATTERN.match(path):
            return path
        return "%s://%s%s" % (self.scheme, self.host or '', path)

    def __repr__(self):
        return "<Url %s>" % self.url
