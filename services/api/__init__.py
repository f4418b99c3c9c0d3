"""Dashboard data HTTP API.

- server.py: Flask routes, parameter parsing and error mapping
- dashboard.py: composes axes, storage queries and chart builders per route
"""
