"""Client-facing project portal."""
