"""
Core engine.

Components:
- dates.py: date normalization and weekday/timezone helpers
- tasks.py: task row classification (today / overdue)
- routine.py: weekly routine grid parsing
- changes.py: per-dataset change detection
- compose.py: deterministic fallback message builders
- service.py: one evaluation pass + read-only queries
"""
