"""Academy attendance package.

This package is organized by feature modules (courses, enrollments, attendance,
auto_attendance, reports, users) with a thin Flask controller layer and
service/repository layers. All persistence goes through a hosted PostgREST API.
"""
