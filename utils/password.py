# utils/password.py
import re
from werkzeug.security import generate_password_hash, check_password_hash
from flask import current_app

UPPER = re.compile(r'[A-Z]')
LOWER = re.compile(r'[a-z]')
DIGIT = re.compile(r'\d')
SYMBOL = re.compile(r'[!@#$%^&*()_\-+=\[\]{};:\'",.<>/?\\|`~]')


def hash_password(plain: str) -> str:
    return generate_password_hash(plain)


def verify_password(hashed: str, plain: str) -> bool:
    return check_password_hash(hashed, plain)


def validate_password_policy(pwd: str) -> list[str]:
    cfg = current_app.config
    min_len = cfg.get("PASSWORD_MIN_LENGTH", 8)
    errs = []
    if len(pwd) < min_len:
        errs.append(f"Password must be at least {min_len} characters")
    if not UPPER.search(pwd):
        errs.append("Password must contain an uppercase letter")
    if not LOWER.search(pwd):
        errs.append("Password must contain a lowercase letter")
    if not DIGIT.search(pwd):
        errs.append("Password must contain a digit")
    if cfg.get("REQUIRE_COMPLEX_SYMBOL", False) and not SYMBOL.search(pwd):
        errs.append("Password must contain a symbol")
    return errs
