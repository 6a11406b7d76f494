"""Constants like http status code, status lines and environment names.

:Functions: status_line
"""

__author__ = "PoorMVC developers"
__date__ = "18 Oct 2026"
__version__ = "1.0.0"

# environments, selected by host name of request
ENV_LOCAL = 'local'
ENV_DEVELOPMENT = 'development'
ENV_STAGING = 'staging'
ENV_PRODUCTION = 'production'

ENVIRONMENTS = (ENV_LOCAL, ENV_DEVELOPMENT, ENV_STAGING, ENV_PRODUCTION)

# 1xx - Informational
HTTP_CONTINUE = 100
HTTP_SWITCHING_PROTOCOLS = 101

# 2xx - Success
HTTP_OK = 200
HTTP_CREATED = 201
HTTP_ACCEPTED = 202
HTTP_NON_AUTHORITATIVE = 203
HTTP_NO_CONTENT = 204
HTTP_RESET_CONTENT = 205
HTTP_PARTIAL_CONTENT = 206

# 3xx - Redirection
HTTP_MULTIPLE_CHOICES = 300
HTTP_MOVED_PERMANENTLY = 301
HTTP_MOVED_TEMPORARILY = 302
HTTP_SEE_OTHER = 303
HTTP_NOT_MODIFIED = 304
HTTP_USE_PROXY = 305
HTTP_TEMPORARY_REDIRECT = 307

# 4xx - Client Error
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_PAYMENT_REQUIRED = 402
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_METHOD_NOT_ALLOWED = 405
HTTP_NOT_ACCEPTABLE = 406
HTTP_PROXY_AUTHENTICATION_REQUIRED = 407
HTTP_REQUEST_TIME_OUT = 408
HTTP_CONFLICT = 409
HTTP_GONE = 410
HTTP_LENGTH_REQUIRED = 411
HTTP_PRECONDITION_FAILED = 412
HTTP_REQUEST_ENTITY_TOO_LARGE = 413
HTTP_REQUEST_URI_TOO_LARGE = 414
HTTP_UNSUPPORTED_MEDIA_TYPE = 415
HTTP_RANGE_NOT_SATISFIABLE = 416
HTTP_EXPECTATION_FAILED = 417

# 5xx - Server Error
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_NOT_IMPLEMENTED = 501
HTTP_BAD_GATEWAY = 502
HTTP_SERVICE_UNAVAILABLE = 503
HTTP_GATEWAY_TIME_OUT = 504

# Status codes, which could be send as redirect or error status line.
STATUS_LINES = {
    HTTP_CONTINUE: "Continue",
    HTTP_SWITCHING_PROTOCOLS: "Switching Protocols",
    HTTP_OK: "OK",
    HTTP_CREATED: "Created",
    HTTP_ACCEPTED: "Accepted",
    HTTP_NON_AUTHORITATIVE: "Non-Authoritative Information",
    HTTP_NO_CONTENT: "No Content",
    HTTP_RESET_CONTENT: "Reset Content",
    HTTP_PARTIAL_CONTENT: "Partial Content",
    HTTP_MULTIPLE_CHOICES: "Multiple Choices",
    HTTP_MOVED_PERMANENTLY: "Moved Permanently",
    HTTP_MOVED_TEMPORARILY: "Found",
    HTTP_SEE_OTHER: "See Other",
    HTTP_NOT_MODIFIED: "Not Modified",
    HTTP_USE_PROXY: "Use Proxy",
    HTTP_TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTP_BAD_REQUEST: "Bad Request",
    HTTP_UNAUTHORIZED: "Unauthorized",
    HTTP_PAYMENT_REQUIRED: "Payment Required",
    HTTP_FORBIDDEN: "Forbidden",
    HTTP_NOT_FOUND: "Not Found",
    HTTP_METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTP_NOT_ACCEPTABLE: "Not Acceptable",
    HTTP_PROXY_AUTHENTICATION_REQUIRED: "Proxy Authentication Required",
    HTTP_REQUEST_TIME_OUT: "Request Time-out",
    HTTP_CONFLICT: "Conflict",
    HTTP_GONE: "Gone",
    HTTP_LENGTH_REQUIRED: "Length Required",
    HTTP_PRECONDITION_FAILED: "Precondition Failed",
    HTTP_REQUEST_ENTITY_TOO_LARGE: "Request Entity Too Large",
    HTTP_REQUEST_URI_TOO_LARGE: "Request-URI Too Large",
    HTTP_UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
    HTTP_RANGE_NOT_SATISFIABLE: "Requested range not satisfiable",
    HTTP_EXPECTATION_FAILED: "Expectation Failed",
    HTTP_INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTP_NOT_IMPLEMENTED: "Not Implemented",
    HTTP_BAD_GATEWAY: "Bad Gateway",
    HTTP_SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTP_GATEWAY_TIME_OUT: "Gateway Time-out",
}


def status_line(status_code: int, protocol: str = "HTTP/1.1"):
    """Return full status line for status code.

    >>> status_line(301)
    'HTTP/1.1 301 Moved Permanently'
    >>> status_line(404, "HTTP/1.0")
    'HTTP/1.0 404 Not Found'

    KeyError is raised, when status code is not in STATUS_LINES table.
    """
    return "%s %d %s" % (protocol, status_code, STATUS_LINES[status_code])
