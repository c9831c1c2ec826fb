"""
Facility Reports Engine

Maintenance ticket core with:
- Email-based role registry (first sign-in only)
- Capability matrix per role
- Free-form report status lifecycle
- Technician assignment with repeat guard
- Soft-delete that hides from admins, never from the reporter
"""

__version__ = "0.1.0"
