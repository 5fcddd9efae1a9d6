"""Top-level Inkwell commands (auto-discovered)."""
