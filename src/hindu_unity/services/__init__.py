"""Service layer for business logic.

Services keep persistence-aware rules and external API clients out of the
routers so they can be exercised directly in tests.
"""
