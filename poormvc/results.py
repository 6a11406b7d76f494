"""Default Poor MVC status handlers.

:Functions: html_escape, bad_request, not_found, internal_server_error,
            not_implemented, service_unavailable
"""

from traceback import format_exception
from sys import exc_info
from logging import getLogger
from typing import Callable, Dict

from poormvc.response import Response
from poormvc.state import HTTP_BAD_REQUEST, HTTP_NOT_FOUND, \
    HTTP_INTERNAL_SERVER_ERROR, HTTP_NOT_IMPLEMENTED, \
    HTTP_SERVICE_UNAVAILABLE, STATUS_LINES

HTML_ESCAPE_TABLE = {'&': "&amp;",
                     '"': "&quot;",
                     "'": "&apos;",
                     '>': "&gt;",
                     '<': "&lt;"}

log = getLogger("poormvc")

# http state handlers, which is called if programmer don't defined his own
default_states: Dict[int, Callable] = {}

# pylint: disable=invalid-name
# pylint: disable=consider-using-f-string


def html_escape(s):
    """Escape to html entities."""
    return ''.join(HTML_ESCAPE_TABLE.get(c, c) for c in s)


def error_page(code: int, body: str, color: str = "#707070"):
    """Return complete html page for error status code."""
    title = "%d - %s" % (code, STATUS_LINES[code])
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        " <head>\n"
        "  <title>%s</title>\n"
        '  <meta http-equiv="content-type" '
        'content="text/html; charset=utf-8"/>\n'
        '  <meta name="robots" content="noindex" />\n'
        "  <style>\n"
        "   body {width: 80%%; margin: auto; padding-top: 30px;}\n"
        "   h1 {text-align: center; color: %s;}\n"
        "   p {text-indent: 30px; margin-top: 30px; margin-bottom: 30px;}\n"
        "   pre .line1 {background: #e0e0e0}\n"
        "  </style>\n"
        " </head>\n"
        " <body>\n"
        "  <h1>%s</h1>\n"
        "%s"
        " </body>\n"
        "</html>" % (title, color, title, body))


def bad_request(req, **kwargs):
    """ 400 Bad Request server error handler. """
    # pylint: disable=unused-argument
    content = error_page(
        HTTP_BAD_REQUEST,
        "  <p>Request for <code>%s</code> has no known host.</p>\n" %
        html_escape(req.uri))
    return Response(content, status_code=HTTP_BAD_REQUEST)


def not_found(req, **kwargs):
    """ 404 - Page Not Found server error handler. """
    # pylint: disable=unused-argument
    log.error("404 Not Found: %s %s", req.method, req.uri)
    content = error_page(
        HTTP_NOT_FOUND,
        "  <p>Your request <code>%s</code> was not found.</p>\n" %
        html_escape(req.uri))
    return Response(content, status_code=HTTP_NOT_FOUND)


def internal_server_error(req, **kwargs):
    """ More debug 500 Internal Server Error server handler.

    It was be called automatically when no handlers are not defined
    for this state. If debug is enabled, Traceback will be generated.
    """
    # pylint: disable=unused-argument
    exc_type, exc_value, exc_traceback = exc_info()
    traceback = ''.join(format_exception(exc_type, exc_value, exc_traceback))
    log.error(traceback)

    body = ''
    if req.debug:
        body += (
            "  <h2>Request detail</h2>\n"
            "  client ip: <b><code>{ip}</code></b><br/>\n"
            "  environment: <b><code>{env}</code></b><br/>\n"
            "  method: <b><code>{method}</code></b><br/>\n"
            "  uri: <b><code>{uri}</code></b><br/>\n"
            "  uri_rule: <b><code>{rule}</code></b><br/>\n"
            "  uri_handler: <b><code>{handler}</code></b><br/>\n"
            "".format(ip=html_escape(req.client_ip),
                      env=req.environment,
                      method=html_escape(req.method),
                      uri=html_escape(req.uri),
                      rule=html_escape(str(req.uri_rule)),
                      handler=html_escape(str(req.uri_handler))))
        body += "  <h2>Exception Traceback</h2>\n  <pre>\n"
        for i, line in enumerate(traceback.split('\n')):
            body += '<span class="line%s">%s</span>\n' % (
                i % 2, html_escape(line))
        body += "  </pre>\n"

    return Response(error_page(HTTP_INTERNAL_SERVER_ERROR, body),
                    status_code=HTTP_INTERNAL_SERVER_ERROR)


def not_implemented(req, code=None, **kwargs):
    """ 501 Not Implemented server error handler. """
    # pylint: disable=unused-argument
    if code:
        body = (
            "  <p>Your request <code>%s</code> returned not implemented\n"
            "   status code <code>%s</code>.</p>\n" % (
                html_escape(req.uri), code))
        log.error('Your request %s returned not implemented status code %d',
                  req.uri, code)
    else:
        body = (
            "  <p>Response for Your request <code>%s</code>\n"
            "   is not implemented</p>\n" % html_escape(req.uri))
    return Response(error_page(HTTP_NOT_IMPLEMENTED, body),
                    status_code=HTTP_NOT_IMPLEMENTED)


def service_unavailable(req, retry_after=None, **kwargs):
    """ 503 Service Unavailable server error handler.

    Retry-After header is set from ``retry_after`` argument, or from
    request configuration.
    """
    # pylint: disable=unused-argument
    if retry_after is None:
        retry_after = req.config.retry_after
    content = error_page(
        HTTP_SERVICE_UNAVAILABLE,
        "  <p>Service is temporarily unavailable, try it again later.</p>\n")
    return Response(content, headers={'Retry-After': str(retry_after)},
                    status_code=HTTP_SERVICE_UNAVAILABLE)


default_states[HTTP_BAD_REQUEST] = bad_request
default_states[HTTP_NOT_FOUND] = not_found
default_states[HTTP_INTERNAL_SERVER_ERROR] = internal_server_error
default_states[HTTP_NOT_IMPLEMENTED] = not_implemented
default_states[HTTP_SERVICE_UNAVAILABLE] = service_unavailable

__all__ = ['html_escape', 'bad_request', 'not_found', 'internal_server_error',
           'not_implemented', 'service_unavailable']
