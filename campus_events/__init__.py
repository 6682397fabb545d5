"""
Campus event discovery service.

Browsable event and club directory, RSVP tracking, an organizer dashboard
and event recommendations ranked against a user profile.
"""
