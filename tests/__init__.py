# tests/__init__.py
"""
Test Suite for the ILP Node Runner.

Organization:
- `core`: Launch logic (launchers, monitor, bootstrap use case) with a fake spawner.
- `adapters`: Process spawning and readiness probes.
- `integration`: Full runs against stand-in executables.
"""
