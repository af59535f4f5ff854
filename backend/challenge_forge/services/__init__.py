"""Services Layer — generation orchestration, prompt templates, and persistence.

Invariants:
    - Services await IO and call into core/ with plain values
    - The TextGenerator collaborator is injected, never imported by core/
"""
