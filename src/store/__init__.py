"""Event delivery layer.

This module forwards validated event records to their destination.
It hides batching and encoding from the importer.
"""
