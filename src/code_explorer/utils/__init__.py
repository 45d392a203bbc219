"""
Utils Package

Date formatting and path helpers.
"""

from .dates import get_date_str, get_date_time_str, parse_timestamp, utc_now
from .paths import get_app_data_dir, get_config_path, relative_file_path

__all__ = [
    "get_date_str",
    "get_date_time_str",
    "parse_timestamp",
    "utc_now",
    "get_app_data_dir",
    "get_config_path",
    "relative_file_path",
]
