"""Attendance State Engine package.

Organized by feature modules (pairing, attendance, requests, closeout, ...)
with a thin Flask controller layer on top of service/repository layers.
"""
