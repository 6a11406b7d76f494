"""Classes, which is used for managing headers.

:Classes:   Headers
:Functions: parse_header
"""
from collections.abc import Mapping
from logging import getLogger
from typing import Union, List, Tuple, Optional

log = getLogger('poormvc')
# pylint: disable=consider-using-f-string

HeadersList = Union[List, Tuple, set, dict]


def parse_header(line: str):
    """Parse a Content-type like header.

    Return the main content-type and a dictionary of options.

    >>> parse_header("text/html; charset=latin-1")
    ('text/html', {'charset': 'latin-1'})
    >>> parse_header("text/plain")
    ('text/plain', {})
    """
    parts = line.split(';')
    key = parts[0].strip()
    pdict = {}
    for part in parts[1:]:
        i = part.find('=')
        if i >= 0:
            name = part[:i].strip().lower()
            value = part[i+1:].strip()
            if len(value) >= 2 and value[0] == value[-1] == '"':
                value = value[1:-1]
            pdict[name] = value
    return key, pdict


class Headers(Mapping):
    """Case insensitive list of header pairs.

    Header values must be strings, which could be encoded to ISO-8859-1
    as PEP 3333 says. Methods Headers.add and Headers.add_header do auto
    conversion from UTF-8, so use UTF-8 strings everywhere.

    Only ``Set-Cookie`` header could be added more times with add method.

    >>> headers = Headers({'X-Powered-By': 'Test'})
    >>> headers['x-powered-by']
    'Test'
    >>> 'X-POWERED-BY' in headers
    True
    """

    def __init__(self, headers: Optional[HeadersList] = None,
                 strict: bool = True):
        """Headers could be created from list, set or tuple of pairs name,
        value or from dictionary.

        If strict is False, names and values are not converted to
        iso-8859-1. This is for request headers only.
        """
        headers = headers or []
        if isinstance(headers, dict):
            headers = headers.items()
        elif not isinstance(headers, (list, tuple, set)):
            raise TypeError("headers must be tuple, list or set "
                            "of str pairs, or dict "
                            "(got {0})".format(type(headers)))
        if strict:
            self.__headers = list(
                (Headers.iso88591(k), Headers.iso88591(v))
                for k, v in headers)
        else:
            self.__headers = list((k, v) for k, v in headers)

    @classmethod
    def from_environ(cls, environ: dict):
        """Create request headers from WSGI environ ``HTTP_`` variables."""
        tmp = []
        for key, val in environ.items():
            if key[:5] == 'HTTP_':
                key = '-'.join(x.capitalize() for x in key[5:].split('_'))
                tmp.append((key, val))
            elif key in ("CONTENT_LENGTH", "CONTENT_TYPE"):
                key = '-'.join(x.capitalize() for x in key.split('_'))
                tmp.append((key, val))
        return cls(tmp, False)

    def __len__(self):
        return len(self.__headers)

    def __getitem__(self, name: str):
        """Return header value identified by lower name."""
        name = name.lower()
        for key, val in self.__headers:
            if key.lower() == name:
                return val
        raise KeyError("{0!r} is not registered".format(name))

    def __delitem__(self, name: str):
        name = name.lower()
        self.__headers = list(kv for kv in self.__headers
                              if kv[0].lower() != name)

    def __setitem__(self, name: str, value: str):
        """Delete all headers with name and set new value."""
        del self[name]
        self.add_header(name, value)

    def __iter__(self):
        return iter(k for k, v in self.__headers)

    def __repr__(self):
        return "Headers(%r)" % repr(tuple(self.__headers))

    def get_all(self, name: str):
        """Return tuple of all values of header identified by lower name.

        >>> headers = Headers([('Set-Cookie', 'one'), ('Set-Cookie', 'two')])
        >>> headers.get_all('set-cookie')
        ('one', 'two')
        """
        name = name.lower()
        return tuple(v for k, v in self.__headers if k.lower() == name)

    def items(self):
        """Return tuple of headers pairs."""
        return tuple(self.__headers)

    def add(self, name: str, value: str):
        """Set header name to value.

        Duplicate names are not allowed except ``Set-Cookie``.
        """
        if name != "Set-Cookie" and name in self:
            raise KeyError("Key %s exist." % name)
        self.add_header(name, value)

    def add_header(self, name: str, value: str):
        """Append header pair without any check."""
        if value is None or value == '':
            raise ValueError("Header value must be set.")
        self.__headers.append((Headers.iso88591(name),
                               Headers.iso88591(str(value))))

    @staticmethod
    def iso88591(value: str) -> str:
        """Doing automatic conversion to iso-8859-1 strings."""
        if not isinstance(value, str):
            raise TypeError("Header name/value must be of type str "
                            "(got {0})".format(value))
        try:
            return value.encode('utf-8').decode('iso-8859-1')
        except UnicodeError as err:
            raise ValueError("Header name/value must be iso-8859-1 "
                             "encoded (got {0})".format(value)) from err
