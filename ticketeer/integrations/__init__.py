"""Tracker integrations for TICKETEER.

This package contains:
- client: JSON client facade for tracker REST APIs
- exceptions: Tracker error hierarchy
- adapters: Per-tracker page recognition and ticket extraction
"""
