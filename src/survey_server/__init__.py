"""survey_server — FastAPI REST API for the survey_forms SDK.

Exposes the question tree, form session management, and answer
load/save as a stateless HTTP API.
"""
