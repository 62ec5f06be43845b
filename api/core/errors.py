"""
Error taxonomy shared by every feature package.

Routers never build HTTP errors for these; `main.py` maps them to status codes.
"""

from __future__ import annotations


class ServiceError(RuntimeError):
    pass


# No matching program / sheet / feedback row.
class NotFound(ServiceError):
    pass


# Query, connection or row-decoding failure.
class DatabaseError(ServiceError):
    pass


# External batch or feedback source failed.
class SourceUnavailable(ServiceError):
    pass
