"""
Application package initializer.

The project is split into small layers so that each one can be
replaced on its own:

* ``schemas`` – the Book shape and its validation rule;
* ``storage`` – persistence backends (SQLite table or JSON file);
* ``services`` – orchestration between the API and storage;
* ``api`` – the FastAPI router exposing ``/api/books``;
* ``core`` – configuration, logging, exceptions and SQLite helpers.
"""

from .main import app, create_app  # noqa: F401
