"""
Password Strength Scoring

Rates a password Weak, Moderate or Strong by counting how many of five
criteria it meets:

- at least 8 characters
- contains a digit
- contains an uppercase letter
- contains a lowercase letter
- contains a symbol (any character that is not a letter, digit or space)

Score 5 is Strong, 3-4 is Moderate, anything lower is Weak.
"""

import re
from enum import Enum
from typing import Dict, List


PASSWORD_MIN_LENGTH = 8

# (description, predicate) pairs, in reporting order
CRITERIA = [
    (f"At least {PASSWORD_MIN_LENGTH} characters", lambda p: len(p) >= PASSWORD_MIN_LENGTH),
    ("At least one digit", lambda p: re.search(r'\d', p) is not None),
    ("At least one uppercase letter", lambda p: re.search(r'[A-Z]', p) is not None),
    ("At least one lowercase letter", lambda p: re.search(r'[a-z]', p) is not None),
    ("At least one special character", lambda p: re.search(r'[^A-Za-z0-9\s]', p) is not None),
]

STRONG_THRESHOLD = 5
MODERATE_THRESHOLD = 3


class PasswordStrength(Enum):
    """Strength rating of a password."""
    WEAK = "Weak"
    MODERATE = "Moderate"
    STRONG = "Strong"


def count_criteria(password: str) -> int:
    """Number of criteria (0-5) the password satisfies."""
    return sum(1 for _, check in CRITERIA if check(password))


def score_password(password: str) -> PasswordStrength:
    """
    Rate a password.
    
    Example:
        >>> score_password("MySecretPassword123!")
        <PasswordStrength.STRONG: 'Strong'>
        >>> score_password("abc")
        <PasswordStrength.WEAK: 'Weak'>
    """
    score = count_criteria(password)
    if score >= STRONG_THRESHOLD:
        return PasswordStrength.STRONG
    if score >= MODERATE_THRESHOLD:
        return PasswordStrength.MODERATE
    return PasswordStrength.WEAK


def check_password(password: str) -> Dict:
    """
    Rate a password and list the criteria it misses.
    
    Returns:
        Dict with 'strength' (PasswordStrength), 'score' (0-5) and
        'missing' (list of unmet criteria)
    """
    missing: List[str] = [desc for desc, check in CRITERIA if not check(password)]
    return {
        'strength': score_password(password),
        'score': len(CRITERIA) - len(missing),
        'missing': missing,
    }
