"""Small I/O helpers."""
