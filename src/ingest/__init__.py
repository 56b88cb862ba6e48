"""Input file ingestion.

This module reads delimited and JSON input files into raw records and
drives them through translation, validation, and the event sink.
"""
