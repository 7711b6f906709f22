from __future__ import annotations

from flask import Flask, request, session

from ..common.web import api_view, envelope, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    @api_view
    def login():
        data = request.get_json(silent=True) or request.form
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["teacher_id"] = s_user.teacher_id

        return envelope(s_user.to_dict(), message="Inicio de sesión exitoso")

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return envelope(message="Sesión cerrada")

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return envelope(
            {
                "user_id": session["user_id"],
                "name": session.get("name"),
                "role": session.get("role"),
                "teacher_id": session.get("teacher_id"),
            }
        )
