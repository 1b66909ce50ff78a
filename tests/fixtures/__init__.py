"""Reusable fixtures for privado-bootstrap tests."""
