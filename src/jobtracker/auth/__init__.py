"""Authentication.

Users → email/password → bcrypt-verified → 7-day JWT bearer token.
Every job route resolves that token to a CurrentUser, and the
user id from the token is what scopes all job queries.
"""
