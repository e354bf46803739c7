"""
httpx adapters for the hosted backend.
"""

from folio.adapters.http.auth_backend import RestAuthBackend
from folio.adapters.http.change_feed import PollingChangeFeed, diff_rows
from folio.adapters.http.notifier import HttpContactNotifier
from folio.adapters.http.rest_client import RestDataClient, raise_for_status

__all__ = [
    "RestDataClient",
    "RestAuthBackend",
    "HttpContactNotifier",
    "PollingChangeFeed",
    "diff_rows",
    "raise_for_status",
]
