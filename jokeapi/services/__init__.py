"""Business logic services.

Services are called by routes and receive the store and cache explicitly.
The rating arithmetic is pure and has no dependencies at all.
"""
