"""Transactional operations behind the admin API."""
