"""
Field rules shared by models and request schemas
"""

import re

COUNTRY_CODE_PATTERN = r"^[A-Z]{2}$"
CURRENCY_CODE_PATTERN = r"^[A-Z]{3}$"
EMAIL_PATTERN = r".+@.+\..+"
TIME_OF_DAY_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"

COUNTRY_CODE_MESSAGE = "Invalid country code. Use ISO 3166-1 alpha-2 codes (e.g., 'US')."
CURRENCY_CODE_MESSAGE = "Invalid currency code. Use ISO 4217 codes (e.g., 'USD')."


def check_country_code(value: str) -> str:
    if value is None or not re.match(COUNTRY_CODE_PATTERN, value):
        raise ValueError(COUNTRY_CODE_MESSAGE)
    return value


def check_currency_code(value: str) -> str:
    if value is None or not re.match(CURRENCY_CODE_PATTERN, value):
        raise ValueError(CURRENCY_CODE_MESSAGE)
    return value


def check_range(field: str, value, minimum, maximum):
    if value is None or value < minimum or value > maximum:
        raise ValueError(f"{field} must be between {minimum} and {maximum}")
    return value


def check_time_of_day(value: str) -> str:
    if not re.match(TIME_OF_DAY_PATTERN, value or ""):
        raise ValueError(f"{value} is not a valid time format (HH:mm)!")
    return value


def minutes_of_day(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)
