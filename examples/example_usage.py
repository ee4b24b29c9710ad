"""Example: use the service layer directly (no Flask).

Prints the session options of the first registered attendee as the
eligibility rules see them right now.
"""

import importlib

from config import get_settings_module

from src.summit_attendance.summit_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    attendees = container.attendee_service.list_all()
    if not attendees:
        print("No attendees registered yet. Run scripts/seed_db.py first.")
        return

    attendee, options = container.recorder.options(attendees[-1].attendee_id)
    print(f"{attendee.name} ({attendee.mobile})")
    for o in options:
        print(f"  Day {o.day} {o.session.display:<20} {o.state.value:<20} {o.reason}")


if __name__ == "__main__":
    main()
