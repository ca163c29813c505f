"""
Service configuration.

All settings come from the environment and are read once at import.
"""

import os

import workforcepilot
from workforcepilot.packs import DEFAULT_PACK_PATH

WFP_LOG_LEVEL = os.getenv("WFP_LOG_LEVEL", "INFO")
WFP_PACK_PATH = os.getenv("WFP_PACK_PATH", str(DEFAULT_PACK_PATH))
WFP_STRICT_SCHEMA = os.getenv("WFP_STRICT_SCHEMA", "true").lower() == "true"
WFP_DOCS_ENABLED = os.getenv("WFP_DOCS_ENABLED", "true").lower() == "true"
WFP_ENGINE_VERSION = os.getenv("WFP_ENGINE_VERSION", workforcepilot.__version__)
WFP_MAX_EVENTS = int(os.getenv("WFP_MAX_EVENTS", "200"))

API_VERSION = "1.0.0"
