"""Tests for redirect rules."""
from pytest import fixture, mark, raises

from poormvc.redirects import Redirects, format_target
from poormvc.response import RedirectResponse

# pylint: disable=missing-function-docstring
# pylint: disable=redefined-outer-name
# pylint: disable=no-self-use


@fixture
def redirects():
    redirects = Redirects()
    redirects.set_redirect('/old-page', '/new-page')
    redirects.set_regex_redirect(r'/old-page/([0-9]*)/page',
                                 '/new-page/%u/page')
    return redirects


class TestLiteral:
    """Literal rules."""

    def test_empty(self):
        assert Redirects().apply('/old-page') is None

    def test_redirect(self, redirects):
        res = redirects.apply('/old-page')
        assert isinstance(res, RedirectResponse)
        assert res.status == "301 Moved Permanently"
        assert res.location == '/new-page'

    def test_no_match(self, redirects):
        assert redirects.apply('/old-page/') is None
        assert redirects.apply(None) is None

    def test_status(self):
        redirects = Redirects()
        redirects.set_redirect('/a', '/b', 302)
        assert redirects.apply('/a').status == "302 Found"

    def test_unknown_status_aborts(self, redirects):
        redirects.set_regex_redirect(r'^/gone$', '/other')
        redirects.set_redirect('/gone', '/new', 308)
        assert redirects.apply('/gone') is None

    def test_callable(self):
        redirects = Redirects()
        redirects.set_redirect('/a', lambda: '/b')
        assert redirects.apply('/a').location == '/b'

    def test_callable_none_falls_through(self):
        redirects = Redirects()
        redirects.set_redirect('/a', lambda: None)
        redirects.set_regex_redirect(r'^/(a)$', '/x/%s')
        assert redirects.apply('/a').location == '/x/a'

    def test_bad_target(self):
        with raises(ValueError):
            Redirects().set_redirect('/a', 42)


class TestPattern:
    """Regular expression rules."""

    def test_redirect(self, redirects):
        res = redirects.apply('/old-page/123/page')
        assert res.status == "301 Moved Permanently"
        assert res.location == '/new-page/123/page'

    def test_empty_capture(self, redirects):
        res = redirects.apply('/old-page//page')
        assert res.location == '/new-page/0/page'

    def test_search(self, redirects):
        res = redirects.apply('/x/old-page/5/page/y')
        assert res.location == '/new-page/5/page'

    def test_order(self):
        redirects = Redirects()
        redirects.set_regex_redirect(r'^/a/(\d+)$', '/first/%s')
        redirects.set_regex_redirect(r'^/a/(\w+)$', '/second/%s')
        assert redirects.apply('/a/1').location == '/first/1'
        assert redirects.apply('/a/b').location == '/second/b'

    def test_unknown_status_aborts(self):
        redirects = Redirects()
        redirects.set_regex_redirect(r'^/a/(\d+)$', '/first/%s', 399)
        redirects.set_regex_redirect(r'^/a/(\w+)$', '/second/%s')
        assert redirects.apply('/a/1') is None

    def test_too_few_captures(self):
        redirects = Redirects()
        redirects.set_regex_redirect(r'^/a/(\d+)$', '/first/%s/%s')
        assert redirects.apply('/a/1') is None

    def test_callable(self):
        redirects = Redirects()
        redirects.set_regex_redirect(
            r'^/product/(\d+)/(\w+)$',
            lambda pid, name: '/shop/%s-%s' % (name, pid), 302)
        res = redirects.apply('/product/7/tea')
        assert res.status_code == 302
        assert res.location == '/shop/tea-7'

    def test_callable_none_continues(self):
        redirects = Redirects()
        redirects.set_regex_redirect(r'^/a/(\d+)$', lambda num: None)
        redirects.set_regex_redirect(r'^/a/(\d+)$x', '/never')
        redirects.set_regex_redirect(r'^/a/', '/fallback')
        assert redirects.apply('/a/1').location == '/fallback'

    def test_same_key_replace(self):
        redirects = Redirects()
        redirects.set_redirect('/a', '/b')
        redirects.set_redirect('/a', '/c')
        assert len(redirects.rules) == 1
        assert redirects.apply('/a').location == '/c'


@mark.parametrize("template, params, result", (
    ('/new/%s', ('x',), '/new/x'),
    ('/new/%d', ('12abc',), '/new/12'),
    ('/new/%d', ('abc',), '/new/0'),
    ('/new/%u', ('-1',), '/new/18446744073709551615'),
    ('/new/%05d', ('42',), '/new/00042'),
    ('/new/%x/%X/%o', ('255', '255', '8'), '/new/ff/FF/10'),
    ('/new/%.2f', ('3.14159',), '/new/3.14'),
    ('/new/%2$s/%1$s', ('a', 'b'), '/new/b/a'),
    ('/100%%/%s', ('x',), '/100%/x'),
    ('/new/%-4s|', ('ab',), '/new/ab  |'),
    ('/new/%.2s', ('abcdef',), '/new/ab'),
    ('/new/%s', (None,), '/new/'),
))
def test_format_target(template, params, result):
    assert format_target(template, params) == result


def test_format_target_too_few():
    with raises(ValueError):
        format_target('/%s/%s', ('a',))
