"""
LLM subsystem.

- client.py: OpenRouter completion client with model fallback
- prose.py: prompt building + deterministic fallback formatting
"""
