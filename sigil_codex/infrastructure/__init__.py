"""Infrastructure Layer: database session management and logging setup.

Invariants:
    - Infrastructure imports from core/ only for the error hierarchy
    - All SQLAlchemy exceptions surfacing here are mapped to DatabaseError
"""
