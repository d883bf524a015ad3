"""Admin surface: file management, config reload, and the log viewer.

All routes live under ``/admin`` and sit behind ``BasicAuth``.
"""

from wren.admin.views import AdminViews, register_admin

__all__ = ["AdminViews", "register_admin"]
