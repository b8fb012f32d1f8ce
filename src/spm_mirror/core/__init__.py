"""Core mirroring library for spm-mirror."""
