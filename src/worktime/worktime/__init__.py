"""Worktime package.

Employee check-in/check-out tracking with status derivation and attendance
statistics. Organized by feature modules (attendance, reports, employees, ...)
with a thin Flask controller layer over service/repository layers.
"""
