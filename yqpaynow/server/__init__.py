"""
YQPayNow REST server.

The FastAPI application lives in :mod:`yqpaynow.server.main`; run it with
the ``yqpaynow-server`` console script or ``python -m yqpaynow.server``.
"""
