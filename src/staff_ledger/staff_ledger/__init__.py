"""Staff Ledger package.

Attendance, leave and plan-gated staff capacity for small businesses. Feature
modules (businesses, shifts, attendance, leaves, ...) each carry a model, a
repository protocol, a SQLite implementation and a service layer.
"""
