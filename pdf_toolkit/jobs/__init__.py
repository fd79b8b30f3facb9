"""Subprocess-backed job orchestration.

Purpose:
- Build engine invocations from validated run options.
- Execute them as isolated runs under <output_root>/<run_id>/.
- Keep a bounded ledger of every run in the host data file.
"""
