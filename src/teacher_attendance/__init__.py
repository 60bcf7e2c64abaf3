"""Teacher attendance backend.

Feature modules (users, teachers, classes, schedules, attendance, audit) each
have a domain model, a repository interface with a MySQL implementation, a
service layer and a thin Flask controller.
"""
