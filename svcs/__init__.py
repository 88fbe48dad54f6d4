"""SVCS - a minimal snapshot-based version control system.

Tracks a set of files, fingerprints their content and stores immutable
snapshots keyed by that fingerprint so earlier states can be restored.
"""

__version__ = "1.0.0"
