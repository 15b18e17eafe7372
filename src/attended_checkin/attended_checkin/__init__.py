"""Attended check-in package.

This package is organized by feature modules (checkin, people, admission, kiosk, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
