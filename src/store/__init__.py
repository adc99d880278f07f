"""Item storage layer.

This module persists organisms, genes, and expression observations
as JSON line items with stable intra-run references.
"""
