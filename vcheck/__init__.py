"""CPE parsing and offline queries, version comparison, config and index cache records, CVSS score helpers."""

__version__ = "0.1.0"