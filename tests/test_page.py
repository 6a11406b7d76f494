"""Tests for Page assembler."""
from pytest import fixture, raises

from poormvc.database import QueryLog, QueryLogEntry
from poormvc.page import Page, query_log_html, array_html
from poormvc.response import HTTPException, StrGeneratorResponse

# pylint: disable=missing-function-docstring
# pylint: disable=redefined-outer-name
# pylint: disable=no-self-use


def start_response(status, headers):
    assert status == "200 OK"
    assert isinstance(headers, list)


def render(page):
    res = page.render()
    return [chunk.decode('utf-8') for chunk in res(start_response)]


@fixture
def query_log():
    query_log = QueryLog()
    query_log.append(QueryLogEntry(
        "SELECT * FROM orders", (), False, 0, '', 2, 1.5))
    query_log.append(QueryLogEntry(
        "SELECT * FROM <missing>", (), True, 1, 'no such table', -1, 0.5))
    return query_log


class TestHead:
    """Html head."""

    def test_first_chunk(self):
        page = Page()
        page.title = "Shop"
        chunks = render(page)
        assert chunks[0].startswith('<!DOCTYPE html>')
        assert chunks[0].endswith('</head>')
        assert '<title>Shop</title>' in chunks[0]
        assert chunks[-1] == '</body></html>'

    def test_escape(self):
        page = Page()
        page.title = '<script>"x"</script>'
        head = page.head_html()
        assert '<script>"x"' not in head
        assert '&lt;script&gt;&quot;x&quot;' in head

    def test_meta(self):
        page = Page()
        page.description = "Best tea"
        page.add_keywords('tea', 'shop')
        page.favicon_url = '/favicon.ico'
        head = page.head_html()
        assert '<meta name="description" content="Best tea" />' in head
        assert '<meta name="keywords" content="tea, shop" />' in head
        assert 'href="/favicon.ico"' in head

    def test_noindex(self):
        page = Page()
        assert 'noindex' not in page.head_html()
        page.indexable = False
        assert '<meta name="robots" content="noindex" />' in page.head_html()

    def test_unique_urls(self):
        page = Page()
        page.add_css_urls('/a.css', '/b.css', '/a.css')
        page.add_javascript_urls('/a.js', '/a.js')
        head = page.head_html()
        assert head.count('/a.css') == 1
        assert head.index('/a.css') < head.index('/b.css')
        assert head.count('/a.js') == 1


class TestBody:
    """Views and inline javascript."""

    def test_views(self):
        page = Page()
        page.set_view_data('items', [1, 2, 3])
        page.add_view(lambda view: '<p>%d</p>' % len(view['items']))
        page.add_view(lambda view: '<p>end</p>')
        html = ''.join(render(page))
        assert '<body><p>3</p><p>end</p>' in html

    def test_view_data(self):
        page = Page()
        page.set_view_data('a', 1)
        assert page.get_view_data('a') == 1
        assert page.get_view_data('b', 2) == 2
        page.view_data['a'] = 5
        assert page.get_view_data('a') == 1

    def test_javascript_content(self):
        page = Page()
        page.javascript_content = 'var x = 1;'
        html = ''.join(render(page))
        assert '//<![CDATA[\nvar x = 1;\n//]]>' in html
        assert 'showDebugDetails' not in html

    def test_no_script(self):
        html = ''.join(render(Page()))
        assert '<script>' not in html

    def test_response(self):
        assert isinstance(Page().render(), StrGeneratorResponse)

    def test_not_found(self):
        page = Page()
        page.not_found = True
        with raises(HTTPException) as err:
            page.render()
        assert err.value.status_code == 404
        assert not page.indexable


class TestDebug:
    """Debug panel."""

    def test_disabled(self, query_log):
        page = Page(query_log)
        assert not page.debug
        assert 'debug_details' not in ''.join(render(page))

    def test_query_log(self, query_log):
        page = Page(query_log)
        page.show_query_log_table()
        html = ''.join(render(page))
        assert '<div id="debug_details" style="display:none;' in html
        assert 'SELECT * FROM orders' in html
        assert 'SELECT * FROM &lt;missing&gt;' in html
        assert '1: no such table' in html
        assert 'Total Query Time:</td><td>2.0</td>' in html
        assert 'function showDebugDetails()' in html
        assert 'Show Debug Details' in html

    def test_view_data(self):
        page = Page()
        page.show_view_data_table()
        page.set_view_data('user', {'name': 'Joe'})
        html = ''.join(render(page))
        assert 'view Key' in html
        assert "{&apos;name&apos;: &apos;Joe&apos;}" in html

    def test_display_array(self):
        page = Page()
        page.add_display_array({'page': '2'}, 'args')
        assert page.debug
        html = ''.join(render(page))
        assert 'args Key' in html
        assert '<td>page</td><td>2</td>' in html

    def test_empty_log_table(self):
        html = query_log_html(QueryLog())
        assert '<th style="padding-left:6px;padding-right:6px;">Num</th>' \
            in html
        assert 'Total Query Time' not in html

    def test_empty_array(self):
        assert array_html({}, 'args') == ''
