"""
Chad 2030 Pipeline Simulator — Display Formatting
"""
from datetime import datetime


def format_currency(value, compact=True):
    """value in USD millions."""
    if compact:
        if value >= 1000:
            return f"${value / 1000:.1f}B"
        return f"${value:.0f}M"
    return f"${value * 1_000_000:,.0f}"


def format_percent(value, decimals=0):
    return f"{value * 100:.{decimals}f}%"


def format_number(value, decimals=0):
    return f"{value:,.{decimals}f}"


def format_months(value):
    return f"{value:.1f} mo"


def format_date(iso_string):
    dt = datetime.fromisoformat(iso_string.replace('Z', '+00:00'))
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


STATUS_TEXT = {
    'GREEN': ('green, within IMF limits', '✓'),
    'YELLOW': ('yellow, approaching limits', '⚠'),
    'RED': ('red, IMF limits exceeded', '✗'),
}


def format_status_for_screen_reader(status):
    return STATUS_TEXT[status][0]


def get_status_icon(status):
    return STATUS_TEXT[status][1]
