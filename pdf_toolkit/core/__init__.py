"""Core (pure) library layer.

This package is intended to be UI-agnostic and safe to import from:
- the job orchestrator
- CLI and API entrypoints
- tests

It should not import Streamlit or spawn processes at import time.
"""
