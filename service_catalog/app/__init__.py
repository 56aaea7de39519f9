"""
Catalog Service package.

Serves paginated product aggregates through a cache-aside layer:

- app.main: FastAPI app, routes, and lifecycle wiring.
- app.caching: Key derivation, cache stores, and the cache-aside orchestrator.
- app.adapters: Authoritative source (PostgreSQL) access.

Design notes:
- Module import must not perform network calls. Redis and PostgreSQL
  connections are opened in the startup hook.
- The orchestrator receives its store and source as constructor
  arguments, so tests swap in doubles without patching globals.
"""
