"""
Core modules for Storage Gas.

This package contains the cost schedule, the pure cost function and the
gas ledger shared by every metered store.
"""
