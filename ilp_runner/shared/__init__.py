# ilp_runner/shared/__init__.py
"""
Shared utilities package.

Cross-cutting concerns used by the core and the adapters alike:
configuration, structured logging, tracing and the DI container.
"""
