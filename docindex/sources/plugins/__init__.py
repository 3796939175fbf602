# docindex/sources/plugins/__init__.py
"""
Built-in source adapters.

Every module in this package is scanned by docindex.sources.registry;
public SourceAdapter subclasses register under their source_type.
"""
