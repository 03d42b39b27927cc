"""projcheck - schema-driven validation and auto-remediation for scaffolded projects."""

__version__ = "0.1.0"
