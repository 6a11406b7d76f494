"""
Poor MVC framework for Python

Current Contents:

* cache: cache accessor over memcache like client.
* config: environment detection and per environment configuration.
* controller: Controller base class with page and session.
* database: DB-API connection wrapper with query log.
* model: Model base class with generic select, insert, update and delete.
* page: Page assembler with debug panel.
* redirects: redirect rules for old urls.
* request: Request context created for each http request.
* response: Response classes and some make responses functions for creating
  request response.
* results: default result handlers like not found or server errors.
* revision: static files revision map.
* routing: Router, which maps path to controller entry point.
* session: self-contained cookie based session class.
* state: constants like http status codes and environments.
* url: Url inspector.
* wsgi: Application callable class, which is the main point for poormvc web
  application.
"""

from poormvc.response import redirect, abort, make_response

from poormvc.wsgi import Application

__all__ = ["Application", "redirect", "abort", "make_response"]
