from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, error_response, json_body, ok, unexpected_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/zones", methods=["GET"], endpoint="zones_list")
    def zones_list():
        try:
            return ok(**container.zone_service.list_zones().to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading zones")

    @app.route("/admin/zones", methods=["POST"], endpoint="admin_zone_add")
    @admin_required
    def admin_zone_add():
        try:
            zones = container.zone_service.add_zone(json_body().get("zone", ""))
            return ok(201, message="Zone added successfully!", **zones.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("adding a zone")

    @app.route("/admin/zones", methods=["DELETE"], endpoint="admin_zone_remove")
    @admin_required
    def admin_zone_remove():
        try:
            label = json_body().get("zone") or request.args.get("zone", "")
            zones = container.zone_service.remove_zone(label)
            return ok(message="Zone has been removed successfully.", **zones.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("removing a zone")
