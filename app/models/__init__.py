from .user import User
from .section import Section
from .check_item import CheckItem
from .check_run import CheckRun
from .check_entry import CheckEntry

__all__ = [
    "User", "Section", "CheckItem", "CheckRun", "CheckEntry",
]
