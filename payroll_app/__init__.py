"""
Malaysian payroll statutory deductions.

EPF, SOCSO, EIS and PCB per employee per pay period, exposed as a FastAPI
service (``payroll_app.api.http``) and a command line tool (``payroll_app.main``).
"""
from __future__ import annotations

__version__ = "0.1.0"
