"""
Calendar engine: recurrence expansion, overlap layout and slot scheduling.
"""

__version__ = "1.0.0"
