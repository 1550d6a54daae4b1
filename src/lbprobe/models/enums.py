"""Enumerations for load balancer statistics and check results."""

from enum import Enum, IntEnum


class ServiceType(str, Enum):
    """Record type as reported in the ``type`` column of ``show stat``."""

    FRONTEND = "0"
    BACKEND = "1"
    SERVER = "2"
    LISTENER = "3"


class Polarity(str, Enum):
    """Which server count a backend quorum check watches."""

    UP = "u"
    DOWN = "d"
    DISABLED = "x"


class Severity(IntEnum):
    """Check outcome. Values double as plugin exit codes."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3
