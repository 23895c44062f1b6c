"""Portal application for the clinic backend.

This package contains models, serializers, views and route registrations
for the clinic website and its administrator panel, together with the
session-bound bearer token authentication guarding the admin routes.
"""
