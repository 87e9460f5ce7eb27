"""Screening application for the test-appointment backend.

This package contains models, serializers, services and route
registrations for patient registration, test results and test
appointment booking.
"""
