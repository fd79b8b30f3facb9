"""Thin UI layer.

This package contains Streamlit pages that:
- collect raw run options
- hand them to the orchestrator
- render the job ledger

Business logic should live in pdf_toolkit.core or pdf_toolkit.jobs.
"""
