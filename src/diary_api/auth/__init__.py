"""Authentication and authorization.

Learn: Users register with a username/password, log in to receive a
JWT access token, and present it as `Authorization: Bearer <token>`.
The decoded token becomes the CurrentIdentity that protected routes
receive; its permission list comes from the user's capability grants.
"""
