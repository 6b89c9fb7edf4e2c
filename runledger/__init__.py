"""
RunLedger - execution query and pagination service.

Reads workflow-run records back out of the execution store:
latest finished runs, active runs, and filtered, cursor-paginated
ranges with counts.
"""

__version__ = "0.1.0"
