"""Tests for headers.Headers class."""

from pytest import raises

from poormvc.headers import Headers, parse_header

# pylint: disable=missing-function-docstring
# pylint: disable=no-self-use


class TestSetValues:
    """Adding headers and or setting header values."""

    def test_constructor_empty(self):
        Headers()
        Headers([])  # list
        Headers(tuple())
        Headers({})  # dict
        Headers(set())

    def test_constructor_tuples(self):
        headers = Headers([('X-Test', 'Ok'), ('Key', 'Value')])
        assert headers['X-Test'] == 'Ok'

        headers = Headers((('X-Test', 'Ok'), ('X-Test', 'Value')))
        assert headers['X-Test'] == 'Ok'
        assert headers.get_all('X-Test') == ('Ok', 'Value')

    def test_constructor_dict(self):
        headers = Headers({'X-Test': 'Ok', 'Key': 'Value'})
        assert headers['x-test'] == 'Ok'

        xheaders = Headers(headers.items())
        assert xheaders['X-Test'] == 'Ok'

    def test_constructor_error(self):
        with raises(TypeError):
            Headers('Value')
        with raises(ValueError):
            Headers(['a', 'b'])
        with raises(TypeError):
            Headers({'None': None})

    def test_set(self):
        headers = Headers()
        headers['X-Test'] = "Ok"
        headers['x-test'] = "Again"
        assert headers.items() == (('x-test', 'Again'),)

    def test_add(self):
        headers = Headers()
        headers.add('Set-Cookie', 'a=1')
        headers.add('Set-Cookie', 'b=2')
        assert headers.get_all('Set-Cookie') == ('a=1', 'b=2')
        headers.add('X-Test', 'Ok')
        with raises(KeyError):
            headers.add('X-Test', 'Again')

    def test_add_header_error(self):
        headers = Headers()
        with raises(ValueError):
            headers.add_header('X-None', '')


class TestEnviron:
    """Request headers from WSGI environ."""

    def test_from_environ(self):
        headers = Headers.from_environ({
            'HTTP_USER_AGENT': 'pytest',
            'HTTP_X_FORWARDED_FOR': '10.0.0.1',
            'CONTENT_TYPE': 'text/plain',
            'PATH_INFO': '/'})
        assert headers['User-Agent'] == 'pytest'
        assert headers['X-Forwarded-For'] == '10.0.0.1'
        assert headers['Content-Type'] == 'text/plain'
        assert len(headers) == 3

    def test_parse_header(self):
        assert parse_header('multipart/form-data; boundary="xyz"') == \
            ('multipart/form-data', {'boundary': 'xyz'})
