"""
Shared utilities for the Dynamic Logic service.

This package aggregates common building blocks:

- config: Configuration via pydantic-settings
- logging: Structured logging with form correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- test_helpers: Fakes and factories for tests

Do not import from service_* packages into shared/.
"""
