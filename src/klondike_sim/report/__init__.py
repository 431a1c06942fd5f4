"""Text rendering of boards and run summaries."""
