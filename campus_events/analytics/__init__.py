"""
Analytics layer.

Responsibilities:
- Keep an in-process log of recommendation runs.
- Aggregate which strategy answered and why the model was skipped.
- Summarise RSVP activity for the organizer dashboard.
"""
