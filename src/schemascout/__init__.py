"""SchemaScout: schema discovery and validation for feature artifacts."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
