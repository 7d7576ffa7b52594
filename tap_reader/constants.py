"""Constants used across the tap-reader package."""

from __future__ import annotations

import re

from .config import TapConfig

DEFAULT_CONFIG = TapConfig()

TAP_VERSION = 13

# Line patterns, matched against the whole line
TAP_VERSION_PATTERN = re.compile(r"TAP version (\d{1,3})")
TEST_PLAN_PATTERN = re.compile(r"(\d+)\.\.(\d+)")
DIAGNOSTIC_PATTERN = re.compile(r"# (.+)")
# ok|not ok, optional number, optional description, optional "# <directive>"
TEST_TITLE_PATTERN = re.compile(r"(ok|not ok) (\d+ )?([^#]+)?(?:# )?(\w+)?.*")
VALID_DIRECTIVES = ("todo", "skip")

# YAML block delimiters
YAML_START_SEPARATOR = "---"
YAML_END_SEPARATOR = "..."

# Limits and indentation defaults
DEFAULT_INDENT_LEVEL = DEFAULT_CONFIG.indent_level
DEFAULT_ITER_LIMIT = DEFAULT_CONFIG.iter_limit
DEFAULT_YAML_LINE_LIMIT = DEFAULT_CONFIG.yaml_line_limit
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
