"""Game engine, observer view and game runner."""
