"""
PoorMVC Response classes.

:Exceptions:    HTTPException, ResponseError
:Classes:       Response, JSONResponse, GeneratorResponse,
                StrGeneratorResponse, NoContentResponse, RedirectResponse
:Functions:     make_response, redirect, abort
"""
from http.client import responses
from io import BytesIO
from json import dumps
from logging import getLogger
from typing import Union, Callable, Iterable, Optional

from poormvc.headers import Headers, HeadersList
from poormvc.state import (
    HTTP_OK,
    HTTP_NO_CONTENT,
    HTTP_MOVED_TEMPORARILY,
    STATUS_LINES
)

log = getLogger('poormvc')

# pylint: disable=unsubscriptable-object
# pylint: disable=consider-using-f-string


def reason_phrase(status_code: int):
    """Return reason phrase from status table, or from http.client."""
    if status_code in STATUS_LINES:
        return STATUS_LINES[status_code]
    if status_code in responses:
        return responses[status_code]
    raise ValueError("Bad response status %s" % status_code)


class IBytesIO(BytesIO):
    """Class for returning bytes when is iterate."""

    def read_kilo(self):
        """Read 1024 bytes from buffer."""
        return self.read(1024)

    def __iter__(self):
        """Iterate object by 1024 bytes."""
        return iter(self.read_kilo, b'')


class BaseResponse:
    """Base class for response."""

    def __init__(self, content_type: str = "",
                 headers: Optional[Union[Headers, HeadersList]] = None,
                 status_code: int = HTTP_OK):
        assert isinstance(content_type, str), \
            "content_type is not string but `%s`" % content_type
        assert isinstance(status_code, int), \
            "status_code is not number but `%s`" % status_code

        # String. The content type, text/html; charset=utf-8 typical.
        self.content_type = content_type

        if isinstance(headers, Headers):
            self.__headers = headers
        elif headers is None:
            self.__headers = Headers(
                (("X-Powered-By", "Poor MVC for Python"),))
        else:
            self.__headers = Headers(headers)

        self.__status_code = status_code
        self.__reason = reason_phrase(status_code)
        self.__done = False
        self._content_length = 0

    @property
    def status_code(self):
        """Http status code, which is **state.HTTP_OK (200)** by default."""
        return self.__status_code

    @status_code.setter
    def status_code(self, value: int):
        self.__reason = reason_phrase(value)
        self.__status_code = value

    @property
    def reason(self):
        """HTTP reason phrase is set automatically with status_code."""
        return self.__reason

    @property
    def status(self):
        """WSGI status string like ``301 Moved Permanently``."""
        return "%d %s" % (self.__status_code, self.__reason)

    @property
    def content_length(self):
        """Return content_length of response."""
        return self._content_length

    @property
    def data(self):
        """Return data content."""
        return b''

    @property
    def headers(self):
        """Reference to output headers object."""
        return self.__headers

    def add_header(self, name: str, value: str):
        """Call Headers.add_header on headers object."""
        self.__headers.add_header(name, value)

    def __start_response__(self, start_response: Callable):
        if self.content_type \
                and not self.__headers.get('Content-Type'):
            self.__headers.add('Content-Type', self.content_type)

        if self.content_length \
                and not self.__headers.get('Content-Length'):
            self.__headers.add('Content-Length',
                               str(self.content_length))

        start_response(self.status, list(self.__headers.items()))

    def __end_of_response__(self):
        """Method **for internal use only!**.

        This method was called from Application object at the end of request
        for returning right value to wsgi server.
        """
        # pylint: disable=no-self-use
        return b''

    def __call__(self, start_response: Callable):
        if self.__done:
            raise RuntimeError('Response can be used only once!')
        try:
            self.__start_response__(start_response)
            return self.__end_of_response__()
        finally:
            self.__done = True


class Response(BaseResponse):
    """HTTP Response object.

    As Response uses BytesIO as internal cache, which is closed by WSGI
    server, **response can be used only once!**.
    """

    def __init__(self, data: Union[str, bytes] = b'',
                 content_type: str = "text/html; charset=utf-8",
                 headers: Optional[Union[Headers, HeadersList]] = None,
                 status_code: int = HTTP_OK):
        assert isinstance(data, (str, bytes)), \
            "data is not string or bytes but %s" % type(data)

        super().__init__(content_type, headers, status_code)

        if isinstance(data, str):
            data = data.encode("utf-8")

        self.__buffer = IBytesIO(data)
        self.__buffer.seek(0, 2)
        self._content_length = len(data)

    @property
    def data(self):
        self.__buffer.seek(0)
        return self.__buffer.read()

    def write(self, data: Union[str, bytes]):
        """Write data to internal buffer."""
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._content_length += len(data)
        self.__buffer.write(data)

    def __end_of_response__(self):
        self.__buffer.seek(0)
        return self.__buffer


class JSONResponse(Response):
    """Simple application/json response.

    ** kwargs from constructor are serialized to json structure.
    """

    def __init__(self, data_=None, charset: str = "utf-8",
                 headers: Optional[Union[Headers, HeadersList]] = None,
                 status_code: int = HTTP_OK, **kwargs):
        mime_type = "application/json"
        if charset:
            mime_type += "; charset="+charset
        super().__init__(dumps(data_ if data_ is not None else kwargs),
                         mime_type, headers, status_code)


class GeneratorResponse(BaseResponse):
    """For response, which use generator as returned value.

    Instance of GeneratorResponse can be used only once!
    """

    def __init__(self, generator: Iterable[bytes],
                 content_type: str = "text/html; charset=utf-8",
                 headers: Optional[Union[Headers, HeadersList]] = None,
                 status_code: int = HTTP_OK):
        super().__init__(content_type=content_type,
                         headers=headers,
                         status_code=status_code)
        self.__generator = generator

    def __end_of_response__(self):
        return self.__generator


class StrGeneratorResponse(GeneratorResponse):
    """Generator response where generator returns str.

    Each chunk is sent to server as soon as it is generated, so a page head
    could be downloaded by browser while the body is still rendered.
    """

    def __init__(self, generator: Iterable[str],
                 content_type: str = "text/html; charset=utf-8",
                 headers: Optional[Union[Headers, HeadersList]] = None,
                 status_code: int = HTTP_OK):
        super().__init__((it.encode("utf-8") for it in generator),
                         content_type=content_type, headers=headers,
                         status_code=status_code)


class NoContentResponse(BaseResponse):
    """For situation, where only state is returned."""

    def __init__(self,
                 headers: Optional[Union[Headers, HeadersList]] = None,
                 status_code: int = HTTP_NO_CONTENT):
        super().__init__(headers=headers, status_code=status_code)


class RedirectResponse(Response):
    """Redirect the browser to another location.

    A short text is sent to the browser informing that the document has moved
    (for those rare browsers that do not support redirection); this text can
    be overridden by supplying a text string (``message``).
    """

    def __init__(self, location: str,
                 status_code: int = HTTP_MOVED_TEMPORARILY,
                 message: Union[str, bytes] = b'',
                 headers: Optional[Union[Headers, HeadersList]] = None):
        super().__init__(message,
                         content_type="text/plain",
                         headers=headers,
                         status_code=status_code)
        self.add_header("Location", location)

    @property
    def location(self):
        """Value of Location header."""
        return self.headers.get("Location")


class ResponseError(RuntimeError):
    """Exception for bad response values."""


class HTTPException(Exception):
    """HTTP Exception to fast stop work.

    Simple error exception:

    >>> HTTPException(404)  # doctest: +ELLIPSIS
    HTTPException(404, {}...)

    Attributes for error handlers:

    >>> HTTPException(503, retry_after=60)  # doctest: +ELLIPSIS
    HTTPException(503, {'retry_after': 60}...)
    """

    def __init__(self, arg: Union[int, BaseResponse], **kwargs):
        """status_code is one of HTTP_* status code from state module.

        If response is set, that will use, otherwise the handler from
        Application will be call."""
        assert isinstance(arg, (int, BaseResponse))
        super().__init__(arg, kwargs)

    def make_response(self):
        """Return response if it was set."""
        if isinstance(self.args[0], BaseResponse):
            return self.args[0]
        return None

    @property
    def status_code(self):
        """Return status code from exception or Response."""
        if isinstance(self.args[0], int):
            return self.args[0]
        return self.args[0].status_code


def make_response(data: Optional[Union[str, bytes, dict, Iterable[bytes]]],
                  content_type: str = "text/html; charset=utf-8",
                  headers: Optional[Union[Headers, HeadersList]] = None,
                  status_code: int = HTTP_OK):
    """Create response from values returned by controller.

    :str, bytes:    Response is returned.
    :list, dict:    JSONResponse is returned.
    :None:          NoContentResponse is returned.
    :Iterable:      GeneratorResponse is returned

    >>> res = make_response("Hello world!")
    >>> res.data
    b'Hello world!'
    >>> make_response(None).status_code
    204
    """
    try:
        if isinstance(data, (str, bytes)):
            return Response(data, content_type, headers, status_code)
        if isinstance(data, (dict, list)):
            return JSONResponse(data, headers=headers,
                                status_code=status_code)
        if data is None:
            if status_code == HTTP_OK:
                status_code = HTTP_NO_CONTENT
            return NoContentResponse(headers=headers, status_code=status_code)

        iter(data)  # try iter data
        return GeneratorResponse(data, content_type, headers, status_code)
    except Exception:  # pylint: disable=broad-except
        log.exception("Error in processing values: %s, %s, %s, %s",
                      type(data), type(content_type), type(headers),
                      type(status_code))

    raise ResponseError(
        "Returned data must by: <bytes|str|dict|list|iterable[bytes]>,"
        " <str>, <Headers|None>, <int>")


def to_response(response):
    """Controller return value to application response."""
    if isinstance(response, BaseResponse):
        return response

    if not isinstance(response, tuple):
        response = (response,)
    return make_response(*response)


def redirect(location: str,
             status_code: int = HTTP_MOVED_TEMPORARILY,
             message: Union[str, bytes] = b'',
             headers: Optional[Union[Headers, HeadersList]] = None):
    """Raise HTTPException with RedirectResponse response."""
    raise HTTPException(
        RedirectResponse(location, status_code, message, headers))


def abort(arg: Union[int, BaseResponse], **kwargs):
    """Raise HTTPException with arg.

    >>> abort(404)
    Traceback (most recent call last):
    ...
    poormvc.response.HTTPException: (404, {})
    """
    raise HTTPException(arg, **kwargs)
