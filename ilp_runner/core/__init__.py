# ilp_runner/core/__init__.py
"""
Core Layer.

Pure launch logic: which processes to start, in what order, with which
arguments and environment. The core never touches the OS directly; it talks
to the outside world through the Ports defined in `ilp_runner.core.ports`.
"""
