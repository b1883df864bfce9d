"""WSGI middleware for the optional language segment of api urls."""

from __future__ import annotations

import re

from .config import DEFAULT_LANG


LANG_ENVIRON_KEY = "framecart.lang"


class LanguagePrefixMiddleware:
    """Rewrites ``<prefix>/<lang>/rest`` to ``<prefix>/rest`` and records the language.

    Two-letter table names cannot be reached through the api because of
    this rewrite.
    """

    def __init__(self, wsgi_app, prefix: str = "/api") -> None:
        self.wsgi_app = wsgi_app
        self._pattern = re.compile(r"^" + re.escape(prefix) + r"/([a-z]{2})(/.*)$")
        self._prefix = prefix

    def __call__(self, environ, start_response):
        path = environ.get("PATH_INFO", "")
        match = self._pattern.match(path)
        if match:
            environ[LANG_ENVIRON_KEY] = match.group(1)
            environ["PATH_INFO"] = self._prefix + match.group(2)
        else:
            environ.setdefault(LANG_ENVIRON_KEY, DEFAULT_LANG)
        return self.wsgi_app(environ, start_response)
