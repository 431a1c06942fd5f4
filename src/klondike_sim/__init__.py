"""Klondike solitaire engine and heuristic planners."""
