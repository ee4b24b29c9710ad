from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, session

from ..common.http import error_response, fail, json_body, login_required, ok, unexpected_error
from ..core.exceptions import AuthenticationError, DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = json_body()
        try:
            admin = container.auth_service.sign_in(data.get("email", ""), data.get("password", ""))

            session.clear()
            session.permanent = bool(data.get("remember_me"))
            app.permanent_session_lifetime = timedelta(days=7)

            session["admin_id"] = admin.admin_id
            session["name"] = admin.full_name
            session["role"] = admin.role.value
            return ok(message="Login successful", admin=admin.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("signing in")

    @app.route("/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        session.clear()
        return ok(message="Signed out")

    @app.route("/admin/me", methods=["GET"], endpoint="admin_me")
    @login_required
    def admin_me():
        try:
            admin = container.auth_service.current_user(int(session["admin_id"]))
            return ok(admin=admin.to_dict())
        except AuthenticationError as e:
            session.clear()
            return fail(str(e), 401)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading the current admin")
