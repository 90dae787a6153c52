"""HTTP API of kinderhub."""
