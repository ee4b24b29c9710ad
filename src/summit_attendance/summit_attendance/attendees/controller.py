from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, error_response, json_body, ok, unexpected_error
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .model import AttendeeListFilter
from .qr import build_payload, render_png
from .service import DayEdit


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name)
    if value in (None, ""):
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be a number")


def register(app: Flask, container: Container) -> None:
    def _options_payload(attendee_id: int) -> dict:
        options, selection = container.auto_checkin.propose(attendee_id)
        return {
            "options": [o.to_dict() for o in options],
            "auto_select": selection.to_dict(),
            "refresh_interval_seconds": app.config.get("REFRESH_INTERVAL_SECONDS", 30),
        }

    @app.route("/api/register", methods=["POST"], endpoint="register_attendee")
    def register_attendee():
        data = json_body()
        try:
            attendee = container.attendee_service.register(
                name=data.get("name", ""),
                mobile=data.get("mobile", ""),
                designation=data.get("designation", ""),
                zone=data.get("zone", ""),
            )
            return ok(201, message="Registration successful", attendee=attendee.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("registering")

    @app.route("/api/attendees/lookup", methods=["GET"], endpoint="attendee_lookup")
    def attendee_lookup():
        try:
            attendee = container.attendee_service.find_by_mobile(request.args.get("mobile", ""))
            return ok(attendee=attendee.to_dict(), **_options_payload(attendee.attendee_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("looking up the attendee")

    @app.route("/api/attendees/<int:attendee_id>/options", methods=["GET"], endpoint="attendee_options")
    def attendee_options(attendee_id: int):
        try:
            attendee = container.attendee_service.get(attendee_id)
            return ok(attendee=attendee.to_dict(), **_options_payload(attendee_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading sessions")

    @app.route("/api/attendees/<int:attendee_id>/qr.png", methods=["GET"], endpoint="attendee_qr")
    def attendee_qr(attendee_id: int):
        try:
            attendee = container.attendee_service.get(attendee_id)
            png = render_png(build_payload(app.config["QR_TOKEN"], attendee.mobile))
            return app.response_class(png, mimetype="image/png")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("generating the QR code")

    # ===== Admin =====

    @app.route("/admin/attendees", methods=["GET"], endpoint="admin_attendees")
    @admin_required
    def admin_attendees():
        try:
            filters = AttendeeListFilter(
                search=request.args.get("search", ""),
                zone=request.args.get("zone", ""),
                attendance=request.args.get("attendance", "all"),
                day1_session=request.args.get("day1_session", ""),
                day2_session=request.args.get("day2_session", ""),
            )
            page = container.attendee_service.list_attendees(
                filters,
                page=_int_arg("page", 1),
                page_size=_int_arg("page_size", DEFAULT_PAGE_SIZE),
            )
            return ok(**page.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("listing attendees")

    @app.route("/admin/attendees", methods=["POST"], endpoint="admin_attendee_add")
    @admin_required
    def admin_attendee_add():
        data = json_body()
        try:
            attendee = container.attendee_service.create(
                name=data.get("name", ""),
                mobile=data.get("mobile", ""),
                designation=data.get("designation", ""),
                zone=data.get("zone", ""),
            )
            return ok(201, message="Attendee added successfully!", attendee=attendee.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("adding the attendee")

    @app.route("/admin/attendees/<int:attendee_id>", methods=["GET"], endpoint="admin_attendee_get")
    @admin_required
    def admin_attendee_get(attendee_id: int):
        try:
            return ok(attendee=container.attendee_service.get(attendee_id).to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading the attendee")

    @app.route("/admin/attendees/<int:attendee_id>", methods=["PUT"], endpoint="admin_attendee_update")
    @admin_required
    def admin_attendee_update(attendee_id: int):
        data = json_body()
        try:
            day1 = DayEdit.from_dict(data["day1"]) if isinstance(data.get("day1"), dict) else None
            day2 = DayEdit.from_dict(data["day2"]) if isinstance(data.get("day2"), dict) else None
            attendee = container.attendee_service.update(
                attendee_id,
                name=data.get("name", ""),
                mobile=data.get("mobile", ""),
                designation=data.get("designation", ""),
                zone=data.get("zone", ""),
                day1=day1,
                day2=day2,
            )
            return ok(message="User data updated successfully!", attendee=attendee.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("updating the attendee")

    @app.route("/admin/attendees/<int:attendee_id>", methods=["DELETE"], endpoint="admin_attendee_delete")
    @admin_required
    def admin_attendee_delete(attendee_id: int):
        try:
            container.attendee_service.delete(attendee_id)
            return ok(message="Attendee deleted")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("deleting the attendee")
