"""codescribe: analyze a source project and synthesize documentation from it."""

__version__ = "0.1.0"
