"""DOM helpers shared by tracker adapters."""

from __future__ import annotations

from bs4 import BeautifulSoup

# Adapters accept either a parsed page or its raw HTML
PageDocument = BeautifulSoup | str

HTML_PARSER = "html.parser"


def as_document(document: PageDocument) -> BeautifulSoup:
    """Return ``document`` as a BeautifulSoup tree, parsing raw HTML."""
    if isinstance(document, BeautifulSoup):
        return document
    return BeautifulSoup(document, HTML_PARSER)


def has(selector: str, document: PageDocument) -> bool:
    """Check whether any element in the page matches a CSS selector."""
    return as_document(document).select_one(selector) is not None
