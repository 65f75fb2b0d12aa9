"""HTTP adapter – async httpx client wrappers."""
from doc_optimizer.adapters.http.client import HttpClient, HttpxHttpClient
from doc_optimizer.adapters.http.resilient_client import ResilientHttpClient

__all__ = ["HttpClient", "HttpxHttpClient", "ResilientHttpClient"]
