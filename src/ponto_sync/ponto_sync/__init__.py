"""Ponto Sync package.

Offline-tolerant client for a remote time-clock backend, organized by feature
modules (employees, punches, sync, kiosk, ...) with a thin Flask controller
layer over plain services.
"""
