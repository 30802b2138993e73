"""Library constants shared by the envelope, settings and broker."""

from __future__ import annotations

LIBRARY_VERSION = "1.0.0"

DEFAULT_NAME_ATTRIBUTE = "qbMessageName"
DEFAULT_VERSION_ATTRIBUTE = "qbMessageVersion"

HTTP_OK = 200
