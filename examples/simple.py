"""This is example and test application for Poor MVC framework.

This sample testing example is free to use, modify and study under same BSD
licence as Poor MVC. So enjoy it ;)
"""

import logging as log
import os
import sqlite3
from html import escape
from sys import path as python_path
from tempfile import gettempdir
from wsgiref.simple_server import make_server

EXAMPLES_PATH = os.path.dirname(__file__)
python_path.insert(
    0, os.path.abspath(os.path.join(EXAMPLES_PATH, os.path.pardir)))

# pylint: disable=import-error, wrong-import-position
from poormvc import Application, redirect, state  # noqa
from poormvc.controller import Controller  # noqa
from poormvc.model import Model  # noqa

logger = log.getLogger()
logger.setLevel("DEBUG")

DB_NAME = os.environ.get(
    "SIMPLE_DB", os.path.join(gettempdir(), "poormvc-simple.db"))

app = application = Application("simple")
app.secret_key = os.urandom(32)  # random key each run
for environment in state.ENVIRONMENTS:
    app.set_config(environment, db_name=DB_NAME)
app.revision.set_mapping('/css/simple.css', '/css/simple.1.css')


def init_db():
    """Create and fill categories table."""
    with sqlite3.connect(DB_NAME) as conn:
        conn.execute("CREATE TABLE IF NOT EXISTS categories ("
                     "id INTEGER PRIMARY KEY, name TEXT, "
                     "created TEXT, updated TEXT)")
        if not conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0]:
            conn.executemany("INSERT INTO categories (name) VALUES (?)",
                             (("Tea",), ("Coffee",), ("Cups",)))


class ModelCategory(Model):
    """Shop categories."""


def menu_view(view):
    """Links to categories."""
    items = ''.join(
        '<li><a href="/category/%d">%s</a></li>' % (
            row['id'], escape(row['name']))
        for row in view.get('categories', ()))
    return '<h1>%s</h1><ul>%s</ul>' % (escape(view['title']), items)


def text_view(view):
    return '<p>%s</p>' % escape(view['text'])


@app.route('/', 'index')
class Home(Controller):
    """Home page with list of categories."""

    def index(self):
        categories = ModelCategory(self.db).select() or []
        if isinstance(categories, dict):
            categories = [categories]
        self.page.title = "Simple shop"
        self.page.description = "Poor MVC example shop"
        self.page.add_keywords("tea", "coffee")
        self.page.add_css_urls(app.revision.path('/css/simple.css'))
        self.page.set_view_data('title', "Categories")
        self.page.set_view_data('categories', categories)
        self.page.add_view(menu_view)
        user = self.session.get('user')
        if user:
            self.page.set_view_data('text', "Logged in as %s" % user)
            self.page.add_view(text_view)
        return self.page.render()


@app.route('/category/<category_id:int>', 'detail')
class Category(Controller):
    """Category detail."""

    def detail(self, category_id):
        category = ModelCategory(self.db).select({'id': category_id})
        if not category:
            self.page.not_found = True
        else:
            self.page.title = category['name']
            self.page.set_view_data('title', category['name'])
            self.page.set_view_data('text', "Category %d" % category_id)
            self.page.add_view(menu_view)
            self.page.add_view(text_view)
        return self.page.render()

    def json(self, category_id):
        return ModelCategory(self.db).select({'id': category_id}) or {}


app.set_route('/api/category/<category_id:int>', Category, 'json')


@app.route('/new-page', 'new')
class NewPage(Controller):
    """Target of redirects."""

    def new(self):
        return "New page", "text/plain"

    def numbered(self, number):
        return "New page %d" % number, "text/plain"


app.set_route('/new-page/<number:int>/page', NewPage, 'numbered')


@app.route('/login', 'login')
class Login(Controller):
    """Session login and logout."""

    def login(self):
        self.session.set('user', self.request.args.getfirst('user', 'guest'))
        redirect('/')

    def logout(self):
        self.session.destroy()
        redirect('/')


app.set_route('/logout', Login, 'logout')


@app.route('/test/error', 'error')
class Error(Controller):
    """Internal server error."""

    def error(self):
        raise RuntimeError("Test exception")


app.set_redirect('/old-page', '/new-page')
app.set_regex_redirect(r'^/old-page/([0-9]*)/page$', '/new-page/%u/page')


@app.redirect_to(r'^/shop/(\w+)$', True, state.HTTP_MOVED_TEMPORARILY)
def shop_category(name):
    """Old category urls by name."""
    with sqlite3.connect(DB_NAME) as conn:
        row = conn.execute("SELECT id FROM categories WHERE name = ?",
                           (name.capitalize(),)).fetchone()
    if row is None:
        return None
    return "/category/%d" % row[0]


@app.http_state(state.HTTP_NOT_FOUND)
def page_not_found(req, **_):
    """Not found handler."""
    return "Page %s was not found." % req.path, "text/plain", None, \
        state.HTTP_NOT_FOUND


init_db()

if __name__ == '__main__':
    httpd = make_server('127.0.0.1', 8080, app)
    print("Starting to serve on http://127.0.0.1:8080")

    httpd.serve_forever()
