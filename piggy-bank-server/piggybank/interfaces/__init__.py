"""Transport interfaces."""
