"""Test suite for the rest-steps package.

This package contains unit and integration tests validating action
step parsing, body normalization, error reporting and configuration.
"""
