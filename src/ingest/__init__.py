"""Expression data ingestion.

This module reads the stage, term, and score tables and joins them
into gene-linked expression observations for the store layer.
"""
