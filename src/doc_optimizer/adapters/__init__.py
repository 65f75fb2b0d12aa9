"""Adapters – httpx client and FastAPI boundary integrations."""
