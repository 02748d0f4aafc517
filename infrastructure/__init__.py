"""Infrastructure layer — caching and observability for the catalog service.

Modules:
    cache       Caller-owned in-memory TTL cache with an injectable clock.
    metrics     Prometheus collectors bound to a caller-owned registry.
"""
