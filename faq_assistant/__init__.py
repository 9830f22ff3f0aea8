"""Refractive-surgery FAQ assistant."""
