"""
Interactive terminal sessions inside running devpods.
"""
from .session import AttachSession, SessionState, parse_exit_status

__all__ = ["AttachSession", "SessionState", "parse_exit_status"]
