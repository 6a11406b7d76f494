"""Tests for Router."""
from uuid import UUID

from pytest import fixture, raises

from poormvc.response import Response
from poormvc.routing import Router, DispatchError, LiteralRoute, \
    PatternRoute

# pylint: disable=missing-function-docstring
# pylint: disable=redefined-outer-name
# pylint: disable=no-self-use
# pylint: disable=too-few-public-methods


class Request:
    """Request mock"""
    method = "GET"
    uri_rule = None
    uri_handler = None

    def __init__(self, path):
        self.path = path


class Home:
    """Controller for tests."""

    def __init__(self, req):
        self.req = req

    def show(self):
        return "home"

    def detail(self, *args):
        return "detail %s" % (args,)

    def _hidden(self):
        return "hidden"


@fixture
def router():
    router = Router()
    router.register('/', False, Home, 'show')
    router.register(r'^/category/(\d+)$', True, Home, 'detail')
    return router


class TestRegister:
    """Routes registration."""

    def test_literal(self, router):
        assert isinstance(router.routes['/'], LiteralRoute)
        assert router.routes['/'].controller is Home

    def test_pattern(self, router):
        route = router.regular_routes[0]
        assert isinstance(route, PatternRoute)
        assert route.pattern == r'^/category/(\d+)$'

    def test_import_string(self):
        router = Router()
        router.register('/', False, '%s:Home' % __name__, 'show')
        assert router.routes['/'].controller is Home

    def test_bad_module(self):
        with raises(DispatchError):
            Router().register('/', False, 'no_such_module:Home', 'show')

    def test_bad_class(self):
        with raises(DispatchError):
            Router().register('/', False, '%s:Nope' % __name__, 'show')

    def test_bad_string(self):
        with raises(DispatchError):
            Router().register('/', False, '%s.Home' % __name__, 'show')

    def test_bad_entry_point(self):
        with raises(DispatchError):
            Router().register('/', False, Home, 'missing')

    def test_private_entry_point(self):
        with raises(DispatchError):
            Router().register('/', False, Home, '_hidden')

    def test_literal_replace(self, router):
        router.register('/', False, Home, 'detail')
        assert router.routes['/'].entry_point == 'detail'

    def test_undefined_filter(self):
        with raises(DispatchError):
            Router().set_route('/x/<id:nope>', Home, 'detail')


class TestMatch:
    """Path matching."""

    def test_literal(self, router):
        route, params = router.match('/')
        assert route.entry_point == 'show'
        assert params == ()

    def test_pattern(self, router):
        route, params = router.match('/category/12')
        assert route.entry_point == 'detail'
        assert params == ('12',)

    def test_no_match(self, router):
        assert router.match('/other') is None
        assert router.match(None) is None

    def test_empty(self):
        assert Router().match('/') is None

    def test_literal_first(self, router):
        router.register(r'^/$', True, Home, 'detail')
        route, _ = router.match('/')
        assert route.entry_point == 'show'

    def test_order(self, router):
        router.register(r'^/category/(\w+)$', True, Home, 'show')
        route, _ = router.match('/category/12')
        assert route.entry_point == 'detail'
        route, _ = router.match('/category/books')
        assert route.entry_point == 'show'

    def test_search(self):
        router = Router()
        router.register(r'/item/(\d+)', True, Home, 'detail')
        _, params = router.match('/shop/item/5/edit')
        assert params == ('5',)

    def test_optional_group(self):
        router = Router()
        router.register(r'^/page(/(\d+))?$', True, Home, 'detail')
        _, params = router.match('/page')
        assert params == (None, None)


class TestFilters:
    """Routes with filters."""

    def test_int(self):
        router = Router()
        router.set_route('/order/<order_id:int>', Home, 'detail')
        route, params = router.match('/order/42')
        assert params == (42,)
        assert route.rule == '/order/<order_id:int>'
        assert router.match('/order/x') is None

    def test_float(self):
        router = Router()
        router.set_route('/price/<value:float>/<unit>', Home, 'detail')
        _, params = router.match('/price/1.5/czk')
        assert params == (1.5, 'czk')

    def test_uuid(self):
        router = Router()
        router.set_route('/user/<uid:uuid>', Home, 'detail')
        _, params = router.match(
            '/user/123e4567-e89b-12d3-a456-426655440000')
        assert params == (UUID('123e4567-e89b-12d3-a456-426655440000'),)

    def test_re(self):
        router = Router()
        router.set_route('/tag/<tag:re:[a-z]{2}>', Home, 'detail')
        assert router.match('/tag/ab')[1] == ('ab',)
        assert router.match('/tag/abc') is None

    def test_custom(self):
        router = Router()
        router.set_filter('uint', r'\d+', int)
        router.set_route('/page/<num:uint>', Home, 'detail')
        assert router.match('/page/3')[1] == (3,)
        assert router.match('/page/-3') is None

    def test_literal_set_route(self):
        router = Router()
        router.set_route('/about', Home, 'show')
        assert '/about' in router.routes


class TestDispatch:
    """Calling of controllers."""

    def test_literal(self, router):
        req = Request('/')
        res = router.dispatch(req)
        assert isinstance(res, Response)
        assert res.data == b"home"
        assert req.uri_rule == '/'

    def test_pattern(self, router):
        req = Request('/category/3')
        res = router.dispatch(req)
        assert res.data == b"detail ('3',)"
        assert req.uri_rule == r'^/category/(\d+)$'

    def test_no_match(self, router):
        assert router.dispatch(Request('/nothing')) is None

    def test_empty(self):
        assert Router().dispatch(Request('/')) is None
