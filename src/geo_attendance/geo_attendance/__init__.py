"""Geo Attendance package.

Feature modules (locations, attendance, requests, reports, ...) each carry a
domain model, a repository Protocol with its MySQL implementation, a service
holding the business rules and a thin Flask controller.
"""
