from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, ok, unexpected_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/certificates", methods=["GET"], endpoint="certificate_lookup")
    def certificate_lookup():
        try:
            cert = container.certificate_service.lookup(request.args.get("mobile", ""))
            return ok(certificate=cert.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("looking up the certificate")
