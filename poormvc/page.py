"""Page assembler, which creates html page from head values and views.

:Classes:   Page
:Functions: query_log_html, array_html
"""
from logging import getLogger
from pprint import pformat
from typing import Callable, Iterable, Mapping, Optional

from poormvc.database import QueryLog
from poormvc.response import StrGeneratorResponse, HTTPException
from poormvc.results import html_escape
from poormvc.state import HTTP_NOT_FOUND

log = getLogger("poormvc")

# pylint: disable=too-many-instance-attributes
# pylint: disable=consider-using-f-string

TABLE_STYLE = ("width:100%%;margin-top:8px;border:1px solid #a0a0a0;"
               "border-collapse:collapse;text-align:%s;")
THEAD_STYLE = "background-color:#f4f5f7;"
ROW_STYLE = "background-color:#ffffff;border:1px solid #ccc;"
TOGGLE_STYLE = (
    "z-index:1000;font-family:Arial, Verdana, sans-serif;font-weight:bold;"
    "color:white;background:#0F75DB;"
    "background-image:linear-gradient(#4697E8 0%, #0F75DB 90%);"
    "box-shadow:0 1px 2px rgba(0, 0, 0, 0.3);padding:8px;cursor:pointer;"
    "position:fixed;border-radius:5px;bottom:16px;right:16px;")

TOGGLE_SCRIPT = (
    'function showDebugDetails() {'
    'var debug_details = document.getElementById("debug_details");'
    'var button = document.getElementById("toggle_button");'
    'if (debug_details.style.display != "none") {'
    'debug_details.style.display = "none";'
    'button.innerHTML = "Show Debug Details";'
    '} else {'
    'debug_details.style.display = "block";'
    'button.innerHTML = "Hide Debug Details";'
    '}}')


def unique(values: Iterable[str]):
    """Yield values without duplicities in first occurrence order."""
    seen = set()
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        yield value


def query_log_html(query_log: QueryLog):
    """Return html table with executed statements."""
    cell = '<th style="padding-left:6px;padding-right:6px;">%s</th>'
    html = ('<table style="%s"><thead style="%s"><tr>' %
            (TABLE_STYLE % 'center', THEAD_STYLE) +
            ''.join(cell % name for name in
                    ('Num', 'Query', 'Error', 'Rows', 'Time (ms)')) +
            '</tr></thead>')
    if len(query_log):
        html += '<tbody>'
        for num, entry in enumerate(query_log):
            if entry.is_error:
                error = '%s: %s' % (entry.error_code,
                                    html_escape(entry.error_message))
            else:
                error = 'None'
            html += (
                '<tr style="%s"><td>%d</td>'
                '<td style="text-align:left;font-size:10px;">%s</td>'
                '<td style="background-color:#%s;">%s</td>'
                '<td>%s</td><td>%.1f</td></tr>' % (
                    ROW_STYLE, num, html_escape(entry.query),
                    'FFCCBA' if entry.is_error else 'DFF2BF', error,
                    entry.affected, entry.time))
        html += (
            '<tr style="background-color:#f8f8f8;border:1px solid #ccc;'
            'font-weight:bold;"><td colspan="4" style="text-align:right;">'
            'Total Query Time:</td><td>%.1f</td></tr></tbody>' %
            query_log.total_time)
    return html + '</table>'


def array_html(values: Mapping, name: str):
    """Return html table with mapping keys and values, empty for nothing."""
    if not values:
        return ''
    html = ('<table style="%s"><thead style="%s"><tr>'
            '<th style="width:40px;">Num</th>'
            '<th style="width:250px;">%s Key</th>'
            '<th>%s Value</th></tr></thead><tbody>' % (
                TABLE_STYLE % 'left', THEAD_STYLE,
                html_escape(name), html_escape(name)))
    for num, (key, value) in enumerate(values.items(), 1):
        if isinstance(value, (dict, list, tuple)):
            value = html_escape(pformat(value)).replace('\n', '<br />')
        else:
            value = html_escape(str(value))
        html += '<tr style="%s"><td>%d</td><td>%s</td><td>%s</td></tr>' % (
            ROW_STYLE, num, html_escape(str(key)), value)
    return html + '</tbody></table>'


class Page:
    """Html page collected by controller.

    .. code:: python

        page = Page(req.query_log)
        page.title = "Categories"
        page.add_css_urls('/css/global.css', '/css/list.css')
        page.set_view_data('categories', categories)
        page.add_view(lambda view: "<h1>%d</h1>" % len(view['categories']))
        return page.render()

    Views are callables, which get view data dictionary and return string.
    """

    def __init__(self, query_log: Optional[QueryLog] = None):
        self.__query_log = query_log if query_log is not None \
            else QueryLog()
        self.__title = ''
        self.__description = ''
        self.__keywords = []
        self.__favicon_url = ''
        self.__js_urls = []
        self.__css_urls = []
        self.__js_content = ''
        self.__views = []
        self.__view_data = {}
        self.__not_found = False
        self.__indexable = True
        self.__show_query_log = False
        self.__show_view_data = False
        self.__display_arrays = []

    # -------------------------- Properties --------------------------- #
    @property
    def title(self):
        return self.__title

    @title.setter
    def title(self, value: str):
        self.__title = value

    @property
    def description(self):
        return self.__description

    @description.setter
    def description(self, value: str):
        self.__description = value

    @property
    def keywords(self):
        """Tuple of keywords."""
        return tuple(self.__keywords)

    @property
    def favicon_url(self):
        return self.__favicon_url

    @favicon_url.setter
    def favicon_url(self, value: str):
        self.__favicon_url = value

    @property
    def javascript_content(self):
        """Inline javascript appended at the end of body."""
        return self.__js_content

    @javascript_content.setter
    def javascript_content(self, value: str):
        self.__js_content = value

    @property
    def javascript_urls(self):
        return tuple(self.__js_urls)

    @property
    def css_urls(self):
        return tuple(self.__css_urls)

    @property
    def indexable(self):
        """If robots could index the page, True by default."""
        return self.__indexable

    @indexable.setter
    def indexable(self, value: bool):
        self.__indexable = bool(value)

    @property
    def not_found(self):
        """Page is rendered as 404 Not Found."""
        return self.__not_found

    @not_found.setter
    def not_found(self, value: bool):
        self.__not_found = bool(value)

    @property
    def view_data(self):
        """Copy of view data dictionary."""
        return self.__view_data.copy()

    @property
    def debug(self):
        """True if any debug output is enabled."""
        return bool(self.__show_query_log or self.__show_view_data
                    or self.__display_arrays)

    # --------------------------- Methods ----------------------------- #
    def add_keywords(self, *keywords: str):
        self.__keywords.extend(keywords)

    def add_javascript_urls(self, *urls: str):
        self.__js_urls.extend(urls)

    def add_css_urls(self, *urls: str):
        self.__css_urls.extend(urls)

    def add_view(self, view: Callable[[dict], str]):
        """Append view, which is rendered in body."""
        self.__views.append(view)

    def set_view_data(self, key: str, value):
        self.__view_data[key] = value

    def get_view_data(self, key: str, default=None):
        return self.__view_data.get(key, default)

    def show_query_log_table(self, value: bool = True):
        self.__show_query_log = bool(value)

    def show_view_data_table(self, value: bool = True):
        self.__show_view_data = bool(value)

    def add_display_array(self, values: Mapping, title: str):
        """Add mapping to debug output."""
        self.__display_arrays.append((values, title))

    # --------------------------- Rendering --------------------------- #
    def head_html(self):
        """Return doctype and html head."""
        html = ('<!DOCTYPE html><html lang="en"><head>'
                '<meta charset="utf-8" />'
                '<meta name="robots" content="noodp" />')
        if not self.__indexable:
            html += '<meta name="robots" content="noindex" />'
        html += (
            '<meta name="description" content="%s" />'
            '<meta name="keywords" content="%s" />'
            '<title>%s</title>' % (
                html_escape(self.__description),
                ', '.join(html_escape(kw) for kw in self.__keywords),
                html_escape(self.__title)))
        if self.__favicon_url:
            html += '<link rel="shortcut icon" href="%s" />' % \
                html_escape(self.__favicon_url)
        html += ''.join(
            '<link href="%s" type="text/css" rel="stylesheet" />' %
            html_escape(url) for url in unique(self.__css_urls))
        html += ''.join(
            '<script type="text/javascript" src="%s"></script>' %
            html_escape(url) for url in unique(self.__js_urls))
        return html + '</head>'

    def debug_html(self):
        """Return hidden debug panel with toggle button."""
        html = '<div id="debug_details" style="display:none;margin:16px;">'
        if self.__show_query_log:
            html += query_log_html(self.__query_log)
        for values, title in self.__display_arrays:
            html += array_html(values, title)
        if self.__show_view_data:
            html += array_html(self.__view_data, 'view')
        html += '</div>'
        html += ('<div id="toggle_button" style="%s" '
                 'onclick="showDebugDetails();">Show Debug Details</div>' %
                 TOGGLE_STYLE)
        return html

    def __generate(self):
        yield self.head_html()      # browser could fetch css and js now
        yield '<body>'
        view_data = self.__view_data
        for view in self.__views:
            yield view(view_data)

        js_content = ''
        if self.debug:
            yield self.debug_html()
            js_content += TOGGLE_SCRIPT
        js_content += self.__js_content
        if js_content:
            yield '<script>\n//<![CDATA[\n%s\n//]]>\n</script>' % js_content
        yield '</body></html>'

    def render(self):
        """Return page response.

        Head is sent as first chunk of response. When page is set as not
        found page, HTTPException with 404 status is raised instead.
        """
        if self.__not_found:
            self.__indexable = False
            raise HTTPException(HTTP_NOT_FOUND)
        return StrGeneratorResponse(self.__generate())
