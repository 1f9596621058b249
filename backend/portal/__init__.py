"""Faculty portal backend."""
