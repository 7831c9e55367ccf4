"""StaffHub backend package.

Organized by feature modules (staff, roster, shifts, ...) with a thin Flask
controller layer over service/repository layers backed by MongoDB.
"""
