# docindex/logging/tags.py
"""
Logging subsystem tags.

Used as message prefixes so log output stays searchable per subsystem.
Changing a tag here updates it project-wide.
"""

INDEXER = "[INDEXER]"
CHANGES = "[CHANGES]"
STATE = "[STATE]"
PROGRESS = "[PROGRESS]"
SOURCE = "[SOURCE]"
HTTP = "[HTTP]"
CONFIG = "[CONFIG]"
CLI = "[CLI]"
