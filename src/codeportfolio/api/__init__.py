"""FastAPI application for the portfolio editor."""
