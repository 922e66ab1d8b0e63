# FeistelVault Test Suite
"""
Test suite including:
- Unit tests (core engine, password strength, messaging)
- Integration tests (password-based cipher end to end)
- Security tests (invalid inputs, malformed envelopes)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
