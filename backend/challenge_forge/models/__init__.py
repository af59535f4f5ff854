"""ORM Models — SQLAlchemy declarative models for the persisted record shapes.

Invariants:
    - All models inherit from Base (db/base.py)
    - Models hold validated records only; nothing unvalidated is ever persisted

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / alembic
"""

from challenge_forge.models.coding_challenge import CodingChallenge  # noqa: F401
from challenge_forge.models.mcq_challenge import McqChallenge  # noqa: F401
