"""HTTP types: immutable request metadata, chainable responses."""

from crawlgate.http.headers import Headers
from crawlgate.http.query import QueryParams
from crawlgate.http.request import Request
from crawlgate.http.response import Delegated, Response

__all__ = ["Delegated", "Headers", "QueryParams", "Request", "Response"]
