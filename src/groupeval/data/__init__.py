"""Dataset model and loading."""
