from __future__ import annotations

from functools import wraps

from flask import session

from ..common.http import fail


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("admin"):
            return fail("Login required", status=401)
        return view(*args, **kwargs)

    return wrapper
