"""WorkforcePilot REST API."""
