"""
auth: user authentication module.

Provides:
  • Signed token issue & verification (``TokenService``)
  • Password hashing (bcrypt)
  • Credential store (create / look up users)
  • Register / Login / Profile API routes
  • ``get_current_user`` FastAPI dependency
"""
