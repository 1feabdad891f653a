"""State/store layer.

This package is the single source of truth for how data arriving from
contract queries and contract events is merged into one session view of
the election.
"""
