from __future__ import annotations

from flask import Flask, request, session

from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        username = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        session.clear()
        session["admin"] = True
        session["username"] = username
        return ok({"username": username}, message="Logged in")

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")
