"""Top-level spm-mirror commands (one module per command)."""
