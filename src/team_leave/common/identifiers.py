from __future__ import annotations

import uuid


def new_id() -> str:
    """Fresh opaque identifier for records created in local mode."""
    return uuid.uuid4().hex


def new_row_id() -> str:
    """Primary key for rows inserted into the remote tables (CHAR(36))."""
    return str(uuid.uuid4())
