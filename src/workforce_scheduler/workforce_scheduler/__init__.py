"""Workforce Scheduler package.

This package is organized by feature modules (timeclock, hours, shifts, ...)
with a thin Flask controller layer and service/repository layers.
"""
