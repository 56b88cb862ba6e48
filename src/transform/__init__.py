"""Transform compilation and record translation.

This module turns declarative transform specifications into ordered
field rules and applies them to raw input records.
"""
