"""
Backup and restore for the cuisine restaurant operations app.
"""

__version__ = "1.0.0"
