"""Merged branch cleanup tool.

Features:
- Find branches already merged into a target branch
- Local or remote (per named remote) operation
- Branch protection list with exact-name matching
- Include and exclude patterns
- Dry-run by default, with a safety delay before deleting
"""

__version__ = "0.1.0"
