"""User registry service: CRUD over a relational store behind a FastAPI API."""

__version__ = "0.1.0"
