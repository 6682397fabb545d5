"""
Authentication helpers: bcrypt password hashing and session-backed users.
"""
