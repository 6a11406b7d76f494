"""Tests for Url inspector."""
from poormvc.url import Url

# pylint: disable=missing-function-docstring
# pylint: disable=no-self-use


class TestPath:
    """Path and path parts."""

    def test_path_info(self):
        url = Url({'PATH_INFO': '/blog/2026', 'QUERY_STRING': 'page=2'})
        assert url.path == '/blog/2026'
        assert url.path_parts == ['blog', '2026']

    def test_request_uri(self):
        url = Url({'REQUEST_URI': '/old-page?a=1'})
        assert url.path == '/old-page'
        assert url.request_uri == '/old-page?a=1'

    def test_root(self):
        url = Url({'PATH_INFO': '/'})
        assert url.path == '/'
        assert url.path_parts is None

    def test_no_path(self):
        url = Url({})
        assert url.path is None
        assert url.path_parts is None

    def test_utf8_path(self):
        raw = '/čaj'.encode('utf-8').decode('iso-8859-1')
        url = Url({'PATH_INFO': raw})
        assert url.path == '/čaj'

    def test_trailing_slash(self):
        url = Url({'PATH_INFO': '/blog/'})
        assert url.path_parts == ['blog', '']

    def test_constructed_uri(self):
        url = Url({'SCRIPT_NAME': '', 'PATH_INFO': '/a b',
                   'QUERY_STRING': 'x=1'})
        assert url.request_uri == '/a%20b?x=1'


class TestHost:
    """Scheme and host."""

    def test_http(self):
        url = Url({'HTTP_HOST': 'local.example.net:8080',
                   'PATH_INFO': '/x', 'wsgi.url_scheme': 'http'})
        assert url.scheme == 'http'
        assert url.host == 'local.example.net:8080'
        assert url.hostname == 'local.example.net'
        assert url.url == 'http://local.example.net:8080/x'

    def test_https(self):
        url = Url({'HTTP_HOST': 'example.net', 'HTTPS': 'on',
                   'PATH_INFO': '/'})
        assert url.scheme == 'https'

    def test_https_off(self):
        url = Url({'HTTP_HOST': 'example.net', 'HTTPS': 'off',
                   'PATH_INFO': '/'})
        assert url.scheme == 'http'

    def test_no_host(self):
        url = Url({'PATH_INFO': '/'})
        assert url.host is None
        assert url.hostname is None

    def test_construct(self):
        url = Url({'HTTP_HOST': 'example.net', 'PATH_INFO': '/'})
        assert url.construct('/css/a.css') == 'http://example.net/css/a.css'
        assert url.construct('https://cdn.net/a.css') == \
            'https://cdn.net/a.css'
