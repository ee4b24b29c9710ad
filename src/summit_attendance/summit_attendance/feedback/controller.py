from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, error_response, json_body, ok, unexpected_error
from ..core.exceptions import DomainError
from ..container import Container
from .model import FeedbackListFilter


def register(app: Flask, container: Container) -> None:
    @app.route("/api/feedback", methods=["POST"], endpoint="feedback_submit")
    def feedback_submit():
        data = json_body()
        try:
            feedback = container.feedback_service.submit_general(
                message=data.get("message", ""),
                name=data.get("name", ""),
                email=data.get("email", ""),
                category=data.get("category", "general"),
                rating=data.get("rating", 0),
                sentiment=data.get("sentiment", "positive"),
            )
            return ok(201, message="Your feedback has been submitted successfully.", feedback=feedback.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("submitting feedback")

    @app.route("/api/feedback/attendee", methods=["POST"], endpoint="feedback_submit_attendee")
    def feedback_submit_attendee():
        data = json_body()
        try:
            feedback = container.feedback_service.submit_for_attendee(
                mobile=data.get("mobile", ""),
                message=data.get("feedback") or data.get("message", ""),
                feedback_type=data.get("feedback_type", "general"),
                rating=data.get("rating", 5),
            )
            return ok(
                201,
                message="Thank you! Your feedback has been submitted successfully.",
                feedback=feedback.to_dict(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("submitting feedback")

    # ===== Admin =====

    @app.route("/admin/feedback", methods=["GET"], endpoint="admin_feedback")
    @admin_required
    def admin_feedback():
        try:
            filters = FeedbackListFilter(
                search=request.args.get("search", ""),
                flow=request.args.get("flow", ""),
                status=request.args.get("status", ""),
                sentiment=request.args.get("sentiment", ""),
                category=request.args.get("category", ""),
                rating=request.args.get("rating", ""),
            )
            items = container.feedback_service.list_feedback(filters)
            return ok(
                items=[f.to_dict() for f in items],
                stats=container.feedback_service.stats().to_dict(),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading feedback")

    @app.route("/admin/feedback/<int:feedback_id>/reply", methods=["POST"], endpoint="admin_feedback_reply")
    @admin_required
    def admin_feedback_reply(feedback_id: int):
        try:
            feedback = container.feedback_service.reply(feedback_id, json_body().get("reply", ""))
            return ok(message="Reply sent successfully.", feedback=feedback.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("sending the reply")

    @app.route("/admin/feedback/<int:feedback_id>/archive", methods=["POST"], endpoint="admin_feedback_archive")
    @admin_required
    def admin_feedback_archive(feedback_id: int):
        try:
            feedback = container.feedback_service.archive(feedback_id)
            return ok(message="Feedback marked as archived.", feedback=feedback.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("archiving feedback")

    @app.route("/admin/feedback/<int:feedback_id>/status", methods=["POST"], endpoint="admin_feedback_status")
    @admin_required
    def admin_feedback_status(feedback_id: int):
        try:
            status = json_body().get("status", "")
            feedback = container.feedback_service.set_status(feedback_id, status)
            return ok(message=f"Feedback marked as {feedback.status.value}.", feedback=feedback.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("updating feedback status")

    @app.route("/admin/feedback/<int:feedback_id>", methods=["DELETE"], endpoint="admin_feedback_delete")
    @admin_required
    def admin_feedback_delete(feedback_id: int):
        try:
            container.feedback_service.delete(feedback_id)
            return ok(message="Feedback deleted")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("deleting feedback")
