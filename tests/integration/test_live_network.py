"""Checks that reach the public internet.

Skipped unless HTTPWAYS_LIVE_NETWORK=1.
"""

from __future__ import annotations

import pytest

from httpways._internal.errors import NotFound
from httpways.checks.catalog import REMOTE_MISSING_URL
from httpways.clients.urlfetch import fetch_text

pytestmark = pytest.mark.network


def test_missing_remote_page_raises_not_found():
    """A missing page on a public site raises NotFound."""
    with pytest.raises(NotFound):
        fetch_text(REMOTE_MISSING_URL, timeout=10.0)
