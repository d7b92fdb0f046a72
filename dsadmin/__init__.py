"""
Operator tooling for Google Cloud Datastore: bulk delete and kind export.
"""

__version__ = "0.1.0"
