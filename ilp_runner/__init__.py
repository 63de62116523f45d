# ilp_runner/__init__.py
"""
ILP Node Runner.

Bootstraps a local Interledger node stack (Redis store, XRP settlement engine,
admin account, node) as child processes in a fixed order and reports each
child's lifecycle. Follows Hexagonal Architecture (Ports & Adapters).
"""

__version__ = "0.1.0"
