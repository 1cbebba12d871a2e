"""Authentication and authorization.

Learn: Users log in with email/password and get back a signed JWT that
carries their id, admin flag and company id. Every request then goes
through the JWT middleware, which turns a valid Bearer token into a
request-scoped identity. Route guards (FastAPI dependencies) decide
whether that identity may call the route.
"""
