"""JSON schema definition for suite report files."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

_ATTACHMENT = {
    "type": "object",
    "required": ["title", "source", "type"],
    "properties": {
        "title": {"type": "string"},
        "source": {"type": "string"},
        "type": {"type": "string"},
    },
}

_STEP = {
    "type": "object",
    "required": ["name", "status", "start", "stop", "steps"],
    "properties": {
        "name": {"type": "string"},
        "status": {"type": "string", "enum": ["passed", "failed"]},
        "start": {"type": "integer"},
        "stop": {"type": "integer"},
        "steps": {"type": "array", "items": {"$ref": "#/definitions/step"}},
        "attachments": {"type": "array", "items": _ATTACHMENT},
    },
}

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "stepnest suite report",
    "type": "object",
    "required": ["schema_version", "uuid", "name", "start", "stop", "cases"],
    "definitions": {"step": _STEP},
    "properties": {
        "schema_version": {"type": "string"},
        "uuid": {"type": "string"},
        "name": {"type": "string"},
        "start": {"type": "integer"},
        "stop": {"type": "integer"},
        "cases": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "status", "start", "stop", "labels", "steps"],
                "properties": {
                    "name": {"type": "string"},
                    "status": {"type": "string", "enum": ["passed", "failed", "pending"]},
                    "start": {"type": "integer"},
                    "stop": {"type": "integer"},
                    "labels": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["name", "value"],
                            "properties": {
                                "name": {"type": "string"},
                                "value": {"type": "string"},
                            },
                        },
                    },
                    "failure": {
                        "type": "object",
                        "required": ["message"],
                        "properties": {
                            "message": {"type": "string"},
                            "trace": {"type": "string"},
                        },
                    },
                    "steps": {"type": "array", "items": {"$ref": "#/definitions/step"}},
                    "attachments": {"type": "array", "items": _ATTACHMENT},
                },
            },
        },
    },
}
