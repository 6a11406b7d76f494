"""Redirect rules for old or moved urls.

:Classes:   Redirects, RedirectRule
:Functions: format_target
"""
# pylint: disable=consider-using-f-string

from collections import OrderedDict
from logging import getLogger
from typing import Callable, NamedTuple, Optional, Union

import re

from poormvc.response import RedirectResponse
from poormvc.state import STATUS_LINES, HTTP_MOVED_PERMANENTLY

log = getLogger("poormvc")

# printf conversion: %[argnum$][flags][width][.precision]specifier
re_conversion = re.compile(
    r"%(?:(\d+)\$)?([-+ 0]*)(\d+)?(?:\.(\d+))?([sduxXofFc%])")
re_number = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

Target = Union[str, Callable[..., Optional[str]]]


class RedirectRule(NamedTuple):
    """One redirect rule."""
    match: str
    is_pattern: bool
    target: Target
    status_code: int
    regex: Optional[re.Pattern] = None


def leading_number(value, integer: bool = True):
    """Return leading number of value, 0 if there is no number.

    >>> leading_number('42abc')
    42
    >>> leading_number('abc')
    0
    >>> leading_number('3.7', False)
    3.7
    """
    if isinstance(value, (int, float)):
        number = value
    else:
        match = re_number.match(str(value if value is not None else ''))
        number = float(match.group(0)) if match else 0
    return int(number) if integer else float(number)


def format_target(template: str, params) -> str:
    """Fill printf style template with parameters.

    >>> format_target('/new/%s/%d', ('books', '12'))
    '/new/books/12'
    >>> format_target('/%2$s/%1$s', ('a', 'b'))
    '/b/a'
    >>> format_target('/page/%05d', ('7',))
    '/page/00007'

    ValueError is raised, when there is less parameters than conversions.
    """
    params = tuple('' if val is None else val for val in params)
    position = 0

    def conversion(match):
        nonlocal position
        argnum, flags, width, precision, specifier = match.groups()
        if specifier == '%':
            return '%'
        if argnum:
            index = int(argnum) - 1
        else:
            index = position
            position += 1
        if index < 0 or index >= len(params):
            raise ValueError("Too few arguments for %r" % template)
        value = params[index]

        fmt = '%' + flags + (width or '')
        if precision is not None:
            fmt += '.' + precision
        if specifier == 's':
            return (fmt + 's') % str(value)
        if specifier in ('f', 'F'):
            return (fmt + 'f') % leading_number(value, False)
        if specifier == 'c':
            return chr(leading_number(value))
        number = leading_number(value)
        if specifier == 'u':
            if number < 0:
                number += 2 ** 64     # unsigned 64 bit integer
            return (fmt + 'd') % number
        return (fmt + specifier) % number

    return re_conversion.sub(conversion, template)


class Redirects:
    """Table of redirect rules.

    Literal rules are checked first, regular rules after them in
    registration order. Rules share one table keyed by match string, so
    registering the same match string again replaces the rule.

    .. code:: python

        redirects = Redirects()
        redirects.set_redirect('/old-page', '/new-page')
        redirects.set_regex_redirect(r'^/old/(\\d+)$', '/new/%d', 302)
        redirects.apply('/old/12').location    # '/new/12'
    """

    def __init__(self):
        self.__rules = OrderedDict()

    @property
    def rules(self):
        """Copy of redirect rules table."""
        return self.__rules.copy()

    def register(self, pattern: str, is_pattern: bool, target: Target,
                 status_code: int = HTTP_MOVED_PERMANENTLY):
        """Add redirect rule."""
        if not isinstance(target, str) and not callable(target):
            raise ValueError("Redirect target must be str or callable")
        regex = re.compile(pattern) if is_pattern else None
        self.__rules[pattern] = RedirectRule(
            pattern, is_pattern, target, status_code, regex)

    def set_redirect(self, match: str, target: Target,
                     status_code: int = HTTP_MOVED_PERMANENTLY):
        """Add literal redirect rule.

        Target is url, or callable without arguments which returns url or
        None, when there is no redirect.
        """
        self.register(match, False, target, status_code)

    def set_regex_redirect(self, match: str, target: Target,
                           status_code: int = HTTP_MOVED_PERMANENTLY):
        """Add regular expression redirect rule.

        Target is printf like template, which is filled with captured groups,
        or callable which gets groups as positional arguments.
        """
        self.register(match, True, target, status_code)

    def __response(self, rule, path, location):
        log.info("Redirect %s -> %s (%d)", path, location, rule.status_code)
        return RedirectResponse(location, rule.status_code)

    def apply(self, path: Optional[str]):
        """Return RedirectResponse for path, or None."""
        if not self.__rules or path is None:
            return None

        rule = self.__rules.get(path)
        if rule is not None and not rule.is_pattern:
            if rule.status_code not in STATUS_LINES:
                log.warning("Unknown redirect status %s for %s",
                            rule.status_code, path)
                return None
            location = rule.target() if callable(rule.target) \
                else rule.target
            if location is not None:
                return self.__response(rule, path, location)

        for rule in self.__rules.values():
            if not rule.is_pattern:
                continue
            match = rule.regex.search(path)
            if match is None:
                continue
            if rule.status_code not in STATUS_LINES:
                log.warning("Unknown redirect status %s for %s",
                            rule.status_code, path)
                return None
            if callable(rule.target):
                location = rule.target(*match.groups())
                if location is None:
                    continue
            else:
                try:
                    location = format_target(rule.target, match.groups())
                except ValueError as err:
                    log.warning("Bad redirect target %r for %s: %s",
                                rule.target, path, err)
                    return None
            return self.__response(rule, path, location)
        return None
