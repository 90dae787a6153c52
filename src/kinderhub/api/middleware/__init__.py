"""HTTP middleware for kinderhub."""

from kinderhub.api.middleware.correlation import CorrelationMiddleware

__all__ = ["CorrelationMiddleware"]
