"""Router, which maps request path to controller entry point.

:Exceptions: DispatchError
:Classes:    Router, LiteralRoute, PatternRoute
"""
# pylint: disable=consider-using-f-string

from importlib import import_module
from logging import getLogger
from typing import Callable, NamedTuple, Optional, Union

import re
import uuid

from poormvc.response import to_response

log = getLogger("poormvc")

# check, if there is define filter in uri
re_filter = re.compile(r'<(\w+)(:[^>]+)?>')


class DispatchError(RuntimeError):
    """Route controller or its entry point could not be resolved."""


class LiteralRoute(NamedTuple):
    """Route selected by exact path equality."""
    path: str
    controller: type
    entry_point: str


class PatternRoute(NamedTuple):
    """Route selected by regular expression search."""
    regex: re.Pattern
    controller: type
    entry_point: str
    converters: tuple = ()
    rule: Optional[str] = None

    @property
    def pattern(self):
        return self.regex.pattern


def resolve_controller(controller: Union[str, type]) -> type:
    """Return controller class from class or ``module:Class`` string."""
    if isinstance(controller, type):
        return controller
    if not isinstance(controller, str) or controller.count(':') != 1:
        raise DispatchError("Invalid controller %r" % (controller,))

    module_name, class_name = controller.split(':')
    try:
        module = import_module(module_name)
    except ImportError as err:
        raise DispatchError("Controller module %s could not be imported" %
                            module_name) from err
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise DispatchError("Controller %s does not exist" % controller)
    return cls


def check_entry_point(cls: type, entry_point: str):
    """Raise DispatchError if entry point is not callable on controller."""
    if not isinstance(entry_point, str) or entry_point.startswith('_') \
            or not callable(getattr(cls, entry_point, None)):
        raise DispatchError("Controller %s has no entry point %r" %
                            (cls.__name__, entry_point))


class Router:
    """Literal and regular expression routing table.

    Literal routes are checked first, then regular routes in order of
    registration. First regular route which match is used.

    .. code:: python

        router = Router()
        router.register('/', False, Home, 'index')
        router.register(r'^/category/(\\d+)$', True, Category, 'detail')
        router.set_route('/order/<order_id:int>', Order, 'detail')
    """

    def __init__(self):
        # literal routes: {'/path': LiteralRoute}
        self.__routes = {}
        # regular routes in registration order
        self.__rroutes = []

        self.__filters = {
            ':int': (r'-?\d+', int),
            ':float': (r'-?\d+(\.\d+)?', float),
            ':word': (r'\w+', str),
            ':hex': (r'[0-9a-fA-F]+', str),
            ':uuid': (r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-'
                      r'[0-9a-fA-F]{4}-[0-9a-fA-F]{12}', uuid.UUID),
            ':re:': (None, str),
            'none': (r'[^/]+', str)
        }

    def __regex(self, match):
        groups = match.groups()
        _filter = str(groups[1]).lower()

        if _filter in self.__filters:
            regex = self.__filters[_filter][0]
        elif _filter[:4] == ':re:':     # :re: filter have user defined regex
            regex = groups[1][4:]
        else:
            raise DispatchError("Undefined route group filter '%s'" % _filter)

        return "(?P<%s>%s)" % (groups[0], regex)

    def __converter(self, _filter):
        _filter = str(_filter).lower()
        _filter = ':re:' if _filter[:4] == ':re:' else _filter
        try:
            return self.__filters[_filter][1]
        except KeyError as err:
            raise DispatchError("Undefined route group filter '%s'" %
                                _filter) from err

    @property
    def filters(self):
        """Copy of filter table."""
        return self.__filters.copy()

    @property
    def routes(self):
        """Copy of literal routes table."""
        return self.__routes.copy()

    @property
    def regular_routes(self):
        """Copy of regular routes list."""
        return list(self.__rroutes)

    def set_filter(self, name: str, regex: str, converter: Callable = str):
        r"""Create new filter or overwrite built-ins.

        .. code:: python

            router.set_filter('uint', r'\d+', int)
        """
        name = ':'+name if name[0] != ':' else name
        self.__filters[name] = (regex, converter)

    def register(self, pattern: str, is_pattern: bool,
                 controller: Union[str, type], entry_point: str,
                 converters: tuple = (), rule: Optional[str] = None):
        """Add route.

        Literal route for the same path is replaced, regular routes are
        appended. DispatchError is raised, when controller or entry point
        could not be resolved.
        """
        # pylint: disable=too-many-arguments
        cls = resolve_controller(controller)
        check_entry_point(cls, entry_point)
        if is_pattern:
            self.__rroutes.append(PatternRoute(
                re.compile(pattern), cls, entry_point, converters, rule))
        else:
            self.__routes[pattern] = LiteralRoute(pattern, cls, entry_point)
        log.debug("Route %s -> %s.%s", pattern, cls.__name__, entry_point)

    def set_route(self, uri: str, controller: Union[str, type],
                  entry_point: str):
        """Add route with optional ``<name:filter>`` groups.

        .. code:: python

            router.set_route('/blog/<year:int>/<slug:word>', Blog, 'post')
        """
        if re_filter.search(uri):
            r_uri = '^' + re_filter.sub(self.__regex, uri) + '$'
            converters = tuple((g[0], self.__converter(g[1]))
                               for g in (m.groups()
                                         for m in re_filter.finditer(uri)))
            self.register(r_uri, True, controller, entry_point,
                          converters, uri)
        else:
            self.register(uri, False, controller, entry_point)

    def match(self, path: Optional[str]):
        """Return tuple (route, parameters) or None."""
        if path is None:
            return None
        if path in self.__routes:
            return self.__routes[path], ()

        for route in self.__rroutes:
            match = route.regex.search(path)
            if match is None:
                continue
            if route.converters:
                return route, tuple(conv(match.group(name))
                                    for name, conv in route.converters)
            return route, match.groups()
        return None

    def dispatch(self, req):
        """Call controller entry point for request path.

        Returns response, or None if no route match.
        """
        found = self.match(req.path)
        if found is None:
            return None
        route, params = found
        req.uri_rule = getattr(route, 'rule', None) or \
            getattr(route, 'pattern', None) or route.path
        req.uri_handler = getattr(route.controller, route.entry_point)
        log.info("%s %s -> %s.%s", req.method, req.path,
                 route.controller.__name__, route.entry_point)

        controller = route.controller(req)
        handler = getattr(controller, route.entry_point)
        return to_response(handler(*params))
