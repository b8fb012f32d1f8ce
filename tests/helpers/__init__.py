"""Test helper modules for the spm-mirror test suite.

- runner: RecordingRunner, a CommandRunner double that records invocations
- manifests: Package.resolved writers for v1 and v2 layouts
"""
from __future__ import annotations
