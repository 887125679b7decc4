"""Two modules that import each other and inject each other's classes lazily."""

from propbind import Container


registry = Container()
