"""
auth — credential primitives.

Provides:
  • Password hashing (bcrypt)
  • Signed token issue & verification (HMAC-SHA256)
  • Domain errors shared with the API layer
"""
