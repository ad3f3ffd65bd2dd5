"""Diary API: user accounts, JWT login and diary entries.

Registration, login and user listing live under /auth; diary entries
are created by authenticated users and tag their author with the
default diary permission.
"""

__version__ = "0.1.0"
