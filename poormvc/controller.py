"""Controller base class.

:Classes: Controller
"""
from poormvc.page import Page
from poormvc.request import Request


class Controller:
    """Base class for application controllers.

    New controller is created for each request, and its entry point is
    called with parameters captured from request path.

    .. code:: python

        @app.route('/category/<category_id:int>', 'detail')
        class Category(Controller):
            def detail(self, category_id):
                self.page.title = "Category %d" % category_id
                return self.page.render()

    Debug tables are added to page in local and development environment.
    """

    def __init__(self, request: Request):
        self.request = request
        self.page = self.setup_page()

    @property
    def session(self):
        """Request session, created at first use."""
        return self.request.session

    @property
    def db(self):
        """Request database connection, created at first use."""
        return self.request.db

    def setup_page(self) -> Page:
        """Create page for this controller."""
        req = self.request
        page = Page(req.query_log)
        if req.is_local or req.is_development:
            page.show_query_log_table(True)
            page.show_view_data_table(True)
            page.add_display_array(req.args, 'args')
            page.add_display_array(req.form, 'form')
            page.add_display_array(req.environ, 'environ')
        return page
