# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Immutable data structures carried by a ``Conn``.

Mapping from ``Conn`` fields to classes::

    conn.req_headers / conn.resp_headers  →  Headers (case-insensitive)
    conn.query_params                     →  QueryParams (ordered, multi-value)
    conn.state                            →  State (attribute access)
    conn.url                              →  str (parsed on demand with URL)

Every class here is read-only; "write" methods return new instances.

Public Exports
==============
::

    from genro_client.datastructures import (
        URL,
        Headers,
        QueryParams,
        State,
        append_query,
        is_absolute,
        join_url,
    )
"""

from .headers import Headers
from .query_params import QueryParams
from .state import State
from .url import URL, append_query, is_absolute, join_url

__all__ = [
    "URL",
    "Headers",
    "QueryParams",
    "State",
    "append_query",
    "is_absolute",
    "join_url",
]
