"""Request context, which is created for each http request.

:Classes:   Request, Args, Form
"""
# pylint: disable=too-many-instance-attributes
# pylint: disable=too-many-public-methods

import os
from http.cookies import SimpleCookie
from logging import getLogger
from time import time
from typing import Any, Callable, Optional
from urllib.parse import parse_qs

from poormvc.config import Config, ConfigError, detect_environment
from poormvc.database import Database, QueryLog
from poormvc.headers import Headers, parse_header
from poormvc.session import Session
from poormvc.url import Url

log = getLogger("poormvc")

FORM_MIME_TYPE = 'application/x-www-form-urlencoded'
BODY_METHODS = ('POST', 'PUT', 'PATCH')


class Args(dict):
    """Dictionary of query string or form arguments.

    Arguments with more values are stored as list.

    >>> args = Args('id=42&tag=a&tag=b')
    >>> args.getfirst('id', func=int)
    42
    >>> args.getlist('tag')
    ['a', 'b']
    """

    def __init__(self, query: str = '', keep_blank_values: bool = False):
        args = parse_qs(query, keep_blank_values) if query else {}
        super().__init__((key, val[0] if len(val) < 2 else val)
                         for key, val in args.items())

    def getfirst(self, key: str, default: Any = None,
                 func: Callable = lambda x: x):
        """Get first item from list for key or default."""
        if key in self:
            value = self[key]
            if isinstance(value, list):
                return func(value[0])
            return func(value)
        return default

    def getlist(self, key: str, default: Optional[list] = None,
                func: Callable = lambda x: x):
        """Returns list of variable values for key or empty list."""
        if key in self:
            value = self[key]
            if isinstance(value, list):
                return [func(item) for item in value]
            return [func(value)]
        return default or []


class Form(Args):
    """Arguments from url encoded request body."""


class Request:
    """Request context with url, configuration, database and session.

    Database connection and session are created when they are used at first
    time, and they are closed by ``close`` method at the end of response.
    """

    def __init__(self, environ: dict, app):
        if environ.get('PATH_INFO') is None and \
                environ.get('REQUEST_URI') is None:
            raise ConnectionError(
                "PATH_INFO not set, probably bad HTTP protocol used.")

        self.__environ = environ
        self.__app = app
        self.__start_time = time()

        # uwsgi do not sent environ variables to apps environ
        if 'uwsgi.version' in environ or 'poor.Version' in os.environ:
            self.__poor_environ = os.environ
        else:
            self.__poor_environ = environ

        self.__url = Url(environ)
        self.__environment = detect_environment(self.__url.hostname)
        self.__config = None

        self.__uri_rule = None
        self.__uri_handler = None
        self.__error_handler = None

        self.__headers = Headers.from_environ(environ)
        self.__args = Args(environ.get('QUERY_STRING', ''))
        self.__form = self.__parse_form()

        if 'Cookie' in self.__headers:
            self.__cookies = SimpleCookie()
            self.__cookies.load(self.__headers['Cookie'])
        else:
            self.__cookies = None

        self.__query_log = QueryLog()
        self.__db = None
        self.__session = None

    def __parse_form(self):
        mime_type, pdict = parse_header(
            self.__environ.get('CONTENT_TYPE', ''))
        if self.method not in BODY_METHODS or mime_type != FORM_MIME_TYPE:
            return Form()
        try:
            length = int(self.__environ.get('CONTENT_LENGTH') or 0)
        except ValueError:
            length = 0
        stream = self.__environ.get('wsgi.input')
        if length <= 0 or stream is None:
            return Form()
        body = stream.read(length)
        return Form(body.decode(pdict.get('charset', 'utf-8'), 'replace'))

    # ------------------------- Server values ------------------------- #
    @property
    def app(self):
        """Return Application object which was created Request."""
        return self.__app

    @property
    def environ(self):
        """Copy of table object containing request environment."""
        return self.__environ.copy()

    def server(self, key: str, default=None):
        """Return one value from request environment."""
        return self.__environ.get(key, default)

    @property
    def url(self):
        """Url inspector of this request."""
        return self.__url

    @property
    def uri(self):
        """Request uri with query string."""
        return self.__url.request_uri

    @property
    def path(self):
        return self.__url.path

    @property
    def path_parts(self):
        return self.__url.path_parts

    @property
    def query(self):
        """The QUERY_STRING environment variable."""
        return self.__environ.get('QUERY_STRING', '')

    @property
    def method(self):
        """String containing the method - ``GET``, ``HEAD``, ``POST``, etc."""
        return self.__environ.get('REQUEST_METHOD', 'GET')

    @property
    def hostname(self):
        """Host, as set by full URI or Host: header without port."""
        return self.__url.hostname

    @property
    def scheme(self):
        return self.__url.scheme

    @property
    def headers(self):
        """Reference to input headers object."""
        return self.__headers

    @property
    def args(self):
        """Arguments from QUERY_STRING."""
        return self.__args

    @property
    def form(self):
        """Arguments from url encoded request body."""
        return self.__form

    @property
    def cookies(self):
        """SimpleCookie object from Cookie header, or None."""
        return self.__cookies

    @property
    def user_agent(self):
        return self.__environ.get('HTTP_USER_AGENT')

    @property
    def referer(self):
        return self.__environ.get('HTTP_REFERER')

    @property
    def client_ip(self):
        """Client address, proxy headers are checked first.

        ``HTTP_CLIENT_IP``, ``HTTP_X_FORWARDED_FOR`` and ``REMOTE_ADDR``
        variables are checked in this order. Only first address from comma
        separated list is returned.
        """
        for key in ('HTTP_CLIENT_IP', 'HTTP_X_FORWARDED_FOR', 'REMOTE_ADDR'):
            value = self.__environ.get(key)
            if value:
                return value.split(',')[0].strip()
        return '0.0.0.0'

    @property
    def start_time(self):
        """Return timestamp when Request was created."""
        return self.__start_time

    # --------------------------- Dispatch ---------------------------- #
    @property
    def uri_rule(self):
        """Rule from router table, which was used. Could be set once."""
        return self.__uri_rule

    @uri_rule.setter
    def uri_rule(self, value: str):
        if self.__uri_rule is None:
            self.__uri_rule = value

    @property
    def uri_handler(self):
        """Controller entry point, which was used. Could be set once."""
        return self.__uri_handler

    @uri_handler.setter
    def uri_handler(self, value: Callable):
        if self.__uri_handler is None:
            self.__uri_handler = value

    @property
    def error_handler(self):
        """This property is set only when error handler was called."""
        return self.__error_handler

    @error_handler.setter
    def error_handler(self, value: Callable):
        if self.__error_handler is None:
            self.__error_handler = value

    # ------------------------- Configuration ------------------------- #
    @property
    def environment(self):
        """Environment name detected from host, or None for unknown host."""
        return self.__environment

    @property
    def config(self) -> Config:
        """Configuration of request environment.

        ConfigError is raised, when environment is not known.
        """
        if self.__config is None:
            if self.__environment is None:
                raise ConfigError("Unknown environment for host %s" %
                                  self.hostname)
            self.__config = self.__app.config(self.__environment,
                                              self.__poor_debug(),
                                              self.get_options())
        return self.__config

    def __poor_debug(self):
        var = self.__poor_environ.get('poor_Debug')
        if var:
            return var.lower() == 'on'
        return None

    @property
    def debug(self):
        """Debug output is enabled.

        ``poor_Debug`` variable has precedence over environment configuration.
        """
        if self.__environment is None:
            return bool(self.__poor_debug())
        return self.config.debug

    @property
    def is_local(self):
        return self.__environment is not None and self.config.is_local

    @property
    def is_development(self):
        return self.__environment is not None and self.config.is_development

    def get_options(self):
        """Returns dictionary with ``app_`` variables without prefix."""
        options = {}
        for key, val in self.__poor_environ.items():
            key = key.strip()
            if key[:4].lower() == 'app_' and isinstance(val, str):
                options[key[4:].lower()] = val.strip()
        return options

    # --------------------------- Resources --------------------------- #
    @property
    def query_log(self):
        """Query log of this request."""
        return self.__query_log

    @property
    def db(self) -> Database:
        """Database connection, which is created at first use.

        DatabaseError is raised, when database is not available.
        """
        if self.__db is None:
            self.__db = Database.connect(self.config, self.__query_log)
        return self.__db

    @property
    def session(self) -> Session:
        """Session loaded from request cookie at first use."""
        if self.__session is None:
            secret_key = self.__app.secret_key
            if not secret_key:
                raise ConfigError("Application secret_key is not set")
            self.__session = Session(secret_key, self.__cookies,
                                     **self.__app.session_options)
        return self.__session

    @property
    def session_used(self):
        """True if session was created in this request."""
        return self.__session is not None

    @property
    def cache(self):
        """Application cache with ``cache_servers`` from configuration."""
        cache = self.__app.cache
        if self.__environment is not None:
            cache.add_servers(self.config.cache_servers)
        return cache

    def construct_url(self, path: str):
        """This function returns a fully qualified URI string."""
        return self.__url.construct(path)

    def close(self):
        """Close database connection, if it was open."""
        if self.__db is not None:
            try:
                self.__db.close()
            finally:
                self.__db = None
