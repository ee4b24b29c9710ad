"""Summit attendance package.

Organized by feature modules (attendees, attendance, schedules, feedback, ...)
with a thin Flask JSON controller layer over service and repository layers.
"""
