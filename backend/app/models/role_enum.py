"""
Role Enumeration Module
=======================

Defines all valid roles in the system.

Roles are declared in order of increasing privilege:
a tester can do everything a developer can, and a manager
can do everything a tester can.
"""

from enum import Enum


class Role(str, Enum):
    """
    System-wide allowed roles.
    """

    DEVELOPER = "developer"
    TESTER = "tester"
    MANAGER = "manager"
