"""MathQuest REST API (FastAPI)."""
