"""
SRM Kernel - shared foundation for the supplier synthetic-data and scoring engine.

Provides:
- Structured JSON logging with request-scoped context
- Typed exception hierarchy
- Shared configuration value objects (grading rules, cleansing toggles)
- Repository gateway over a persisted key-value store
"""

__version__ = "0.1.0"
