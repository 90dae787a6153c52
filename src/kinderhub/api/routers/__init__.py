"""API routers of kinderhub."""
