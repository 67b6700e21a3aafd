"""templ: fetch, find and render text templates."""

__version__ = "0.3.0"
