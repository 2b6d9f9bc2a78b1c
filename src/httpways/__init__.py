"""httpways: ways to talk HTTP from Python, checked against a demo application."""

from __future__ import annotations

from httpways._internal.config import HttpWaysConfig, load_config
from httpways._internal.errors import (
    ConfigError,
    HttpWaysError,
    InvalidURL,
    NotFound,
    ResponseParseError,
    ServerError,
)
from httpways.clients.builder import BuilderResponse, ContentType, HttpBuilder, RequestRecord
from httpways.clients.connection import UrlConnection
from httpways.clients.pooled import BasicResponseHandler, PooledClient, ResponseHandler, execute_once
from httpways.clients.urlfetch import fetch_lines, fetch_text, open_reader, parse_url, post_form

__version__ = "0.1.0"

__all__ = [
    "BasicResponseHandler",
    "BuilderResponse",
    "ConfigError",
    "ContentType",
    "HttpBuilder",
    "HttpWaysConfig",
    "HttpWaysError",
    "InvalidURL",
    "NotFound",
    "PooledClient",
    "RequestRecord",
    "ResponseHandler",
    "ResponseParseError",
    "ServerError",
    "UrlConnection",
    "execute_once",
    "fetch_lines",
    "fetch_text",
    "load_config",
    "open_reader",
    "parse_url",
    "post_form",
]
