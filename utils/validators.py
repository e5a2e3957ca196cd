import re
from datetime import date, datetime

from utils.datetime_helpers import to_naive_utc
from utils.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PERSON_NAME_MAX_LENGTH = 100


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def require_text(value, field: str, max_length: int | None = None, min_length: int = 1) -> str:
    """必填字符串：去首尾空白后校验长度，返回清洗后的值。"""
    if not isinstance(value, str) or len(value.strip()) < min_length:
        if min_length > 1:
            raise ValidationError(f"{field} must be at least {min_length} characters")
        raise ValidationError(f"{field} is required")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value


def parse_optional_text(value, field: str):
    """可选文本：None 原样返回，其余必须是字符串。"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def parse_date(value, field: str):
    """
    接受 date / ISO 日期字符串（YYYY-MM-DD，允许带时间部分）。
    None 或空字符串返回 None（表示清空）。
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)")


def parse_datetime(value, field: str):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"{field} must be an ISO datetime")
        if parsed.tzinfo is not None:
            parsed = to_naive_utc(parsed)
        return parsed
    raise ValidationError(f"{field} must be an ISO datetime")


def parse_hours(value, field: str):
    """工时：None 表示清空；否则必须是非负整数。"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a non-negative integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be a non-negative integer")
        value = int(value)
    if value < 0:
        raise ValidationError(f"{field} must be a non-negative integer")
    return value


def parse_id(value, field: str):
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer id")


def normalize_tags(tags) -> list[str]:
    """
    标签按集合语义存储：保留首次出现顺序并去重。
    None 视为空列表。
    """
    if tags is None:
        return []
    if not isinstance(tags, (list, tuple, set)):
        raise ValidationError("tags must be a list of strings")
    result: list[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValidationError("tags must be a list of strings")
        if tag not in result:
            result.append(tag)
    return result
