"""Static files revision map.

:Classes: Revision
"""
from typing import Dict


class Revision:
    """Map of static file paths to revisioned url paths.

    .. code:: python

        app.revision.set_mapping('/css/global.css', '/css/global.3f2a.css')
        app.revision.url(req, '/css/global.css')
        # 'https://example.net/css/global.3f2a.css'

    Not mapped paths are used as they are.
    """

    def __init__(self):
        self.__map: Dict[str, str] = {}

    @property
    def mapping(self):
        """Copy of revision map."""
        return self.__map.copy()

    def set_mapping(self, path: str, url_path: str):
        self.__map[path] = url_path

    def set_mappings(self, mappings: Dict[str, str]):
        """Merge mappings to revision map."""
        self.__map.update(mappings)

    def path(self, path: str) -> str:
        """Return revisioned path."""
        return self.__map.get(path, path)

    def url(self, req, path: str) -> str:
        """Return absolute url of revisioned path on request host."""
        return req.construct_url(self.path(path))
