"""Configuration module."""

import os
from pathlib import Path

import yaml

PROJECT_NAME = "sheetdb"

_DEFAULT_SETTINGS_PATH = str(Path(__file__).resolve().parent / "resources" / "sample_settings.yaml")
SETTINGS_PATH = os.getenv("SHEETDB_SETTINGS_PATH", _DEFAULT_SETTINGS_PATH)

if not os.path.exists(SETTINGS_PATH):
    raise FileNotFoundError(f"SheetDB settings file not found: {SETTINGS_PATH}")

with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
    settings = yaml.safe_load(f) or {}

########################
#   Log Settings       #
########################

_log_settings = settings.get("log", {})
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", _log_settings.get("log_path", "sheetdb.log"))
# Possible values below are the typical python logging levels, plus "disable".
LOG_FILE_LEVEL = os.getenv("LOG_FILE_LEVEL", _log_settings.get("log_file_level", "disable")).upper()
LOG_STREAM_LEVEL = os.getenv("LOG_STREAM_LEVEL", _log_settings.get("log_stream_level", "info")).upper()

########################
#   Web Server         #
########################

_webserver_settings = settings.get("web_server", {})
WEBSERVER_HOST = os.getenv("WEBSERVER_HOST", _webserver_settings.get("host", "0.0.0.0"))
WEBSERVER_PORT = int(os.getenv("WEBSERVER_PORT", _webserver_settings.get("port", 5000)))

########################
#   Data Settings      #
########################

_data_settings = settings.get("data", {})
DATA_DIR = os.getenv("SHEETDB_DATA_DIR", _data_settings.get("data_dir", "sheets"))

########################
#   Query Settings     #
########################

_query_settings = settings.get("query", {})
REGEX_MAX_PATTERN_LENGTH = int(
    os.getenv("REGEX_MAX_PATTERN_LENGTH", _query_settings.get("regex_max_pattern_length", 200))
)
REGEX_MAX_INPUT_LENGTH = int(os.getenv("REGEX_MAX_INPUT_LENGTH", _query_settings.get("regex_max_input_length", 10000)))
REGEX_MATCH_TIMEOUT = float(os.getenv("REGEX_MATCH_TIMEOUT", _query_settings.get("regex_match_timeout", 0.1)))
TEXT_MAX_LENGTH = int(os.getenv("TEXT_MAX_LENGTH", _query_settings.get("text_max_length", 1000)))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", _query_settings.get("max_page_limit", 1000)))
