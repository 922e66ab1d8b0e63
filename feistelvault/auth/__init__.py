# Authentication Module
"""
Password helpers:
- Password strength scoring (Weak / Moderate / Strong) - password_strength.py
"""

from .password_strength import (
    PasswordStrength,
    score_password,
    check_password,
    count_criteria,
)

__all__ = [
    'PasswordStrength',
    'score_password',
    'check_password',
    'count_criteria',
]
