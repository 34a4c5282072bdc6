"""Inbound adapters.

Inbound adapters turn incoming requests into engine operations:

    - sql_parser: statement text -> operation requests
    - rest_api: FastAPI application, one endpoint per operation
    - shell: interactive line-oriented client

Import the submodules directly, e.g.
``from minirel.adapters.inbound.rest_api import create_app``.
"""
