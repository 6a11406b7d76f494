"""Application callable class, which is the main point for wsgi application.

:Classes:   Application
:Functions: close_after
"""
# pylint: disable=unsubscriptable-object
# pylint: disable=consider-using-f-string

from os import environ
from logging import getLogger
from typing import Union, Callable, Optional, ClassVar

from poormvc.cache import Cache
from poormvc.config import Config, ConfigError
from poormvc.database import DatabaseError
from poormvc.redirects import Redirects, Target
from poormvc.request import Request
from poormvc.results import default_states, not_implemented, \
    internal_server_error
from poormvc.response import HTTPException, ResponseError, \
    to_response
from poormvc.revision import Revision
from poormvc.routing import Router
from poormvc.state import ENVIRONMENTS, HTTP_BAD_REQUEST, HTTP_NOT_FOUND, \
    HTTP_INTERNAL_SERVER_ERROR, HTTP_MOVED_PERMANENTLY, \
    HTTP_SERVICE_UNAVAILABLE

log = getLogger("poormvc")


def close_after(req: Request, iterable):
    """Yield response data and close request resources at the end."""
    try:
        yield from iterable
    finally:
        close = getattr(iterable, 'close', None)
        if close is not None:
            close()
        req.close()


class Application():
    """Poor MVC application which is called by WSGI server.

    Application holds router, redirect rules, configuration for each
    environment and http state handlers.

    .. code:: python

        app = application = Application("shop")
        app.set_config('production', db_name='/var/lib/shop/shop.db')
        app.set_redirect('/old-page', '/new-page')

        @app.route('/', 'index')
        class Home(Controller):
            def index(self):
                return self.page.render()
    """
    # pylint: disable=too-many-public-methods
    __instances: ClassVar[list[str]] = []

    def __init__(self, name="__main__"):
        """Application class is per name singleton.

        That means, there could be exist only one instance with same name.
        """
        if Application.__instances.count(name):
            raise RuntimeError('Application with name %s exist yet.' % name)
        Application.__instances.append(name)

        # Application name
        self.__name = name

        self.__router = Router()
        self.__redirects = Redirects()

        # http state handlers: {HTTP_NOT_FOUND: my_404_handler}
        self.__shandlers = {}

        # options for each environment set by set_config
        self.__configs = {}

        self.__secret_key = None
        self.__session_options = {}
        self.__cache = Cache()
        self.__revision = Revision()

    @property
    def name(self):
        """Return application name."""
        return self.__name

    @property
    def router(self):
        return self.__router

    @property
    def redirects(self):
        return self.__redirects

    @property
    def states(self):
        """Copy of table with http state handlers."""
        return self.__shandlers.copy()

    @property
    def secret_key(self):
        """Secret key for session cookie encryption.

        It could be set by ``app_secret_key`` variable too.
        """
        return self.__secret_key or self.get_options().get('secret_key')

    @secret_key.setter
    def secret_key(self, value: Union[str, bytes]):
        self.__secret_key = value

    @property
    def session_options(self):
        """Cookie options for PoorSession (expires, domain, secure...)."""
        return self.__session_options

    @session_options.setter
    def session_options(self, value: dict):
        self.__session_options = dict(value)

    @property
    def cache(self):
        return self.__cache

    @cache.setter
    def cache(self, value):
        """Set Cache instance or memcache like client."""
        self.__cache = value if isinstance(value, Cache) else Cache(value)

    def add_cache_server(self, host: str, port: Optional[int] = None):
        """Add memcache server to application cache.

        .. code:: python

            app.add_cache_server('127.0.0.1', 11211)
        """
        self.__cache.add_server(host, port)

    @property
    def revision(self):
        """Static files revision map."""
        return self.__revision

    # ------------------------- Configuration ------------------------- #
    def set_config(self, environment: str, **options):
        """Set options for environment.

        .. code:: python

            app.set_config('production', db_name='shop.db', retry_after=120)
        """
        if environment not in ENVIRONMENTS:
            raise ConfigError("Unknown environment %s" % environment)
        self.__configs.setdefault(environment, {}).update(options)

    def config(self, environment: str, debug: Optional[bool] = None,
               request_options: Optional[dict] = None):
        """Return Config for environment.

        Options from set_config are overwritten by ``app_`` variables from
        os.environ, and those by ``app_`` variables from request environ
        (``request_options``), which is what WSGI server sends.
        """
        options = self.__configs.get(environment, {}).copy()
        options.update(self.get_options())
        options.update(request_options or {})
        return Config(environment, options, debug)

    @staticmethod
    def get_options():
        """Returns dictionary with application variables from system
        environment.

        Application variables start with ``app_`` prefix,
        but in returned dictionary is set without this prefix.

        .. code:: python

            app_db_name = /var/lib/shop/shop.db   # application variable db_name
            app_retry_after = 120                 # variable retry_after
        """
        options = {}
        for key, val in environ.items():
            key = key.strip()
            if key[:4].lower() == 'app_':
                options[key[4:].lower()] = val.strip()
        return options

    # ---------------------------- Routes ----------------------------- #
    def route(self, uri: str, entry_point: str):
        """Wrap controller class to be handler for uri.

        .. code:: python

            @app.route('/category/<category_id:int>', 'detail')
            class Category(Controller):
                def detail(self, category_id):
                    ...
        """
        def wrapper(cls):
            self.set_route(uri, cls, entry_point)
            return cls
        return wrapper

    def set_route(self, uri: str, controller: Union[str, type],
                  entry_point: str):
        """Set controller entry point for uri, see Router.set_route."""
        self.__router.set_route(uri, controller, entry_point)

    def add_route(self, match: str, is_pattern: bool,
                  controller: Union[str, type], entry_point: str):
        """Add literal or regular expression route, see Router.register.

        .. code:: python

            app.add_route('/', False, 'shop.controllers:Home', 'show')
        """
        self.__router.register(match, is_pattern, controller, entry_point)

    def set_filter(self, name: str, regex: str, converter: Callable = str):
        """Create new route filter, see Router.set_filter."""
        self.__router.set_filter(name, regex, converter)

    # --------------------------- Redirects --------------------------- #
    def redirect_to(self, match: str, is_pattern: bool = False,
                    status_code: int = HTTP_MOVED_PERMANENTLY):
        """Wrap function to be redirect target.

        Function returns url, or None if there is no redirect.

        .. code:: python

            @app.redirect_to(r'^/product/(\\d+)$', True)
            def product(product_id):
                return "/shop/product/%s" % product_id
        """
        def wrapper(fun):
            self.__redirects.register(match, is_pattern, fun, status_code)
            return fun
        return wrapper

    def set_redirect(self, match: str, target: Target,
                     status_code: int = HTTP_MOVED_PERMANENTLY):
        """Set literal redirect, see Redirects.set_redirect."""
        self.__redirects.set_redirect(match, target, status_code)

    def set_regex_redirect(self, match: str, target: Target,
                           status_code: int = HTTP_MOVED_PERMANENTLY):
        """Set regular expression redirect, see Redirects.set_regex_redirect.
        """
        self.__redirects.set_regex_redirect(match, target, status_code)

    # ------------------------- State handlers ------------------------ #
    def http_state(self, status_code: int):
        """Wrap function to handle http status codes.

        .. code:: python

            @app.http_state(state.HTTP_NOT_FOUND)
            def page_not_found(req, **_):
                return "Your page %s was not found." % req.path, "text/plain"
        """
        def wrapper(fun):
            self.set_http_state(status_code, fun)
            return fun
        return wrapper

    def set_http_state(self, status_code: int, fun: Callable):
        """Set function as handler for http state code."""
        self.__shandlers[status_code] = fun

    def pop_http_state(self, status_code: int):
        """Pop handler for http state."""
        return self.__shandlers.pop(status_code)

    def state_from_table(self, req: Request, status_code: int, **kwargs):
        """Internal method, which is called if another http state has occurred.

        If status code is in Application.states (fill with http_state
        function), call this handler.
        """
        if status_code in self.__shandlers:
            try:
                handler = self.__shandlers[status_code]
                req.error_handler = handler
                return handler(req, **kwargs)
            except HTTPException as http_err:
                response = http_err.make_response()
                if response:
                    return response
                return internal_server_error(req)
            except Exception:  # pylint: disable=broad-except
                return internal_server_error(req)
        elif status_code in default_states:
            handler = default_states[status_code]
            req.error_handler = handler
            return handler(req, **kwargs)
        else:
            return not_implemented(req, status_code)

    def handler_from_table(self, req: Request):
        """Call right controller, or return redirect response.

        When no route and no redirect is found, HTTPException with
        404 status is raised.
        """
        response = self.__router.dispatch(req)
        if response is not None:
            return response

        response = self.__redirects.apply(req.path)
        if response is not None:
            return response

        raise HTTPException(HTTP_NOT_FOUND)

    def __error_response(self, req, status_code: int, **kwargs):
        try:
            return to_response(self.state_from_table(req, status_code,
                                                     **kwargs))
        except Exception:  # pylint: disable=broad-except
            log.error("Bad returned value from %s", req.error_handler)
            return internal_server_error(req)

    def __request__(self, env, start_response):
        """Create Request instance and return wsgi response.

        Request for unknown host gets 400 Bad Request. Then router,
        redirects and 404 Not Found are tried in this order.
        """
        # pylint: disable=too-many-branches
        try:
            request = Request(env, self)
        except ConnectionError as err:
            log.warning(str(err))
            log.warning('   ***   You should ignore next error   ***')
            return ()

        try:
            if request.environment is None:
                log.warning("Unknown environment for host %r",
                            env.get('HTTP_HOST'))
                raise HTTPException(HTTP_BAD_REQUEST)
            response = to_response(self.handler_from_table(request))
        except HTTPException as http_err:
            response = http_err.make_response()
            if not response:
                status_code = http_err.args[0]
                kwargs = http_err.args[1]
                response = self.__error_response(request, status_code,
                                                 **kwargs)
        except DatabaseError as err:
            log.error("Database is not available: %s", err)
            response = self.__error_response(request,
                                             HTTP_SERVICE_UNAVAILABLE)
        except ConnectionError as err:
            log.warning(str(err))
            log.warning('   ***   You should ignore next error   ***')
            request.close()
            return ()
        except ResponseError:
            log.error("Bad returned value from %s", request.uri_handler)
            response = self.__error_response(request,
                                             HTTP_INTERNAL_SERVER_ERROR)
        except Exception:  # pylint: disable=broad-except
            log.error("Exception in %s", request.uri_handler)
            response = self.__error_response(request,
                                             HTTP_INTERNAL_SERVER_ERROR)

        if request.session_used:
            request.session.header(response)

        return close_after(request, response(start_response))

    def __call__(self, env, start_response):
        """Callable define for Application instance.

        This method run __request__ method.
        """
        return self.__request__(env, start_response)

    def __repr__(self):
        return '%s - callable Application class instance' % self.__name
