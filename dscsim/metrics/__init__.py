__all__ = ["StateLog"]

from .state_log import StateLog
