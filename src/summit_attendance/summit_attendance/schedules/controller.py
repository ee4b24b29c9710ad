from __future__ import annotations

from flask import Flask

from ..common.http import error_response, ok, unexpected_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedule", methods=["GET"], endpoint="schedule")
    def schedule():
        """Session table with each window's live status."""

        try:
            now = container.evaluator.now()
            days = []
            for day in container.registry.days():
                sessions = []
                for s in container.registry.sessions_for_day(day):
                    item = s.to_dict()
                    item["window"] = container.evaluator.evaluate(s, now).to_dict()
                    sessions.append(item)
                event_date = container.registry.event_date(day)
                days.append({"day": day, "date": event_date.strftime("%Y-%m-%d"), "sessions": sessions})
            return ok(now=now.isoformat(), days=days)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading the schedule")
