"""Core Layer — the extraction pipeline: pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are deterministic: same raw text and prompt, same record

Design Decisions:
    - Functional core separated from imperative shell: the generation call and
      persistence wrap the pipeline, never run inside it
"""
