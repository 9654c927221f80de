"""Business logic services.

Services contain all business logic and are called by routes.
Services are deterministic given "now" and accept dependencies explicitly.
"""
