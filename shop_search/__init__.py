"""
Top-level package for the storefront search relevance engine.

This package turns a free-text shopping query plus a candidate set of
store listings (already fetched by a retrieval step elsewhere) into a
ranked, de-duplicated and paginated page of results.  It also exposes
the shared normalisation helpers that the retrieval side should use so
both halves see the same view of text.  There are no side-effects on
import; the HTTP host lives in :mod:`shop_search.api` and the command
line host in :mod:`shop_search.cli`.
"""

__version__ = "1.0.0"
