"""Core (pure) library layer.

This package is intended to be UI-agnostic and safe to import from:
- the CLI entrypoint
- the HTTP API
- tests

It should not trigger long-running side effects at import time.
"""
