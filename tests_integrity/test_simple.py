"""Base integrity test"""
from os import environ
from os.path import dirname, join, pardir

from pytest import fixture
from requests import Session

from .support import check_url, start_server

# pylint: disable=inconsistent-return-statements
# pylint: disable=missing-function-docstring
# pylint: disable=no-self-use
# pylint: disable=redefined-outer-name

LOCAL = {'Host': 'local.example.net'}


@fixture(scope="module")
def url(request):
    """URL (server fixture in fact)."""
    url = environ.get("TEST_SIMPLE_URL", "").strip('/')
    if url:
        return url

    process = start_server(
        request,
        join(dirname(__file__), pardir, 'examples/simple.py'))

    yield "http://localhost:8080"  # server is running
    process.kill()
    process.wait()


@fixture
def session(url):
    session = Session()
    res = check_url(url+"/login?user=tester", status_code=302,
                    session=session, allow_redirects=False)
    assert "SESSID" in session.cookies
    cookie = res.headers["Set-Cookie"]
    assert "; HttpOnly" in cookie
    return session


class TestSimple():
    """Test for routes."""

    def test_root(self, url):
        res = check_url(url)
        assert "<h1>Categories</h1>" in res.text
        assert "/css/simple.1.css" in res.text
        assert "debug_details" not in res.text

    def test_category(self, url):
        res = check_url(url+"/category/1")
        assert "Category 1" in res.text

    def test_category_json(self, url):
        res = check_url(url+"/api/category/2")
        assert res.json()['id'] == 2

    def test_category_not_found(self, url):
        res = check_url(url+"/category/9999", status_code=404)
        assert res.text == "Page /category/9999 was not found."

    def test_not_found(self, url):
        check_url(url+"/no-page", status_code=404)

    def test_bad_variable(self, url):
        check_url(url+"/category/abc", status_code=404)

    def test_debug_panel(self, url):
        res = check_url(url, headers=LOCAL)
        assert "debug_details" in res.text
        assert "SELECT * FROM categories" in res.text

    def test_error(self, url):
        res = check_url(url+"/test/error", status_code=500)
        assert "Traceback" not in res.text

    def test_error_debug(self, url):
        res = check_url(url+"/test/error", status_code=500, headers=LOCAL)
        assert "Test exception" in res.text


class TestRedirects:
    """Test for redirect rules."""

    def test_redirect(self, url):
        res = check_url(url+"/old-page", status_code=301,
                        allow_redirects=False)
        assert res.headers["Location"] == "/new-page"

    def test_regex_redirect(self, url):
        res = check_url(url+"/old-page/12/page", status_code=301,
                        allow_redirects=False)
        assert res.headers["Location"] == "/new-page/12/page"
        res = check_url(url+"/old-page/12/page")
        assert res.text == "New page 12"

    def test_callable_redirect(self, url):
        res = check_url(url+"/shop/coffee", status_code=302,
                        allow_redirects=False)
        assert res.headers["Location"] == "/category/2"

    def test_callable_redirect_none(self, url):
        check_url(url+"/shop/films", status_code=404)


class TestSession:
    """Test for session cookie."""

    def test_login(self, url, session):
        res = check_url(url, session=session)
        assert "Logged in as tester" in res.text

    def test_logout(self, url, session):
        check_url(url+"/logout", status_code=302, session=session,
                  allow_redirects=False)
        res = check_url(url, session=session)
        assert "Logged in as" not in res.text

    def test_no_cookie(self, url):
        res = check_url(url)
        assert "Set-Cookie" not in res.headers
