"""Mini README: Attendance tracking for langar sevadars.

The ``register`` module owns the attendance document and exposes the
mark/unmark operations used by the web interface.
"""

from .register import PRESENT, AttendanceRegister

__all__ = ["AttendanceRegister", "PRESENT"]
