"""MathQuest - backend for the MathQuest learning platform."""
