"""
spm-mirror - local mirrors for Swift package dependencies

Mirrors the source-control pins of a Swift package into a local directory
and points the Swift Package Manager at those copies, for offline,
reproducible, or containerized builds.
"""

__version__ = "1.1.1"
__all__ = ["__version__"]
