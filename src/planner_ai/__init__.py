"""
Planner AI.

Reads a task sheet and a class-routine grid, works out what is due today, and sends
a plain-text digest (plus a notice whenever the routine grid changes).
"""
