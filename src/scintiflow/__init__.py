"""
scintiflow: patient pathway tracking for a nuclear-medicine department

Follows each patient from request to archive, keeping per-room form data and a
timestamped ledger of every room visit.
"""

__version__ = "0.1.0"
