"""
Library package
Manifest model, loading, and generation from the music directory
"""

from .manifest import Manifest, LibraryStats, parse_manifest, load_manifest
from .generator import ManifestGenerator, generate_manifest

__all__ = [
    'Manifest',
    'LibraryStats',
    'parse_manifest',
    'load_manifest',
    'ManifestGenerator',
    'generate_manifest',
]
