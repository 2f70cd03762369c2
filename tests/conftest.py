"""Pytest fixtures for analyzer front end tests."""

from unittest.mock import MagicMock

import pytest

from app import create_app
from models import AnalysisResult


@pytest.fixture
def full_payload() -> dict:
    """A response shaped like the one the reference analyzer sends."""
    return {
        "tokens": [
            {"type": "IDENTIFIER", "value": "x", "line": 1, "column": 1, "position": 0},
            {"type": "OPERATOR", "value": "=", "line": 1, "column": 3, "position": 2},
            {"type": "NUMBER", "value": "10", "line": 1, "column": 5, "position": 4},
            {"type": "NEWLINE", "value": "\n", "line": 1, "column": 7, "position": 6},
            {"type": "KEYWORD", "value": "print", "line": 2, "column": 1, "position": 7},
        ],
        "syntaxTree": [
            {
                "type": "ASSIGNMENT",
                "line": 1,
                "children": [
                    {"type": "IDENTIFIER", "value": "x", "line": 1},
                    {"type": "NUMBER", "value": "10", "line": 1},
                ],
            },
            {
                "type": "PRINT_STATEMENT",
                "line": 2,
                "children": [
                    {
                        "type": "BINARY_EXPRESSION",
                        "line": 2,
                        "children": [
                            {"type": "IDENTIFIER", "value": "x", "line": 2},
                            {"type": "OPERATOR", "value": "+", "line": 2},
                            {"type": "STRING", "value": '"a"', "line": 2},
                        ],
                    }
                ],
            },
        ],
        "semanticErrors": [
            {
                "type": "TYPE_MISMATCH",
                "message": "incompatible types: int + string",
                "line": 2,
                "severity": "error",
                "expectedType": "int",
                "actualType": "string",
            }
        ],
        "symbolTable": [
            {"name": "x", "type": "int", "value": "10", "line": 1, "scope": "global", "used": True},
            {"name": "f", "type": "lambda", "value": "", "line": 3, "scope": "global", "used": False},
        ],
    }


@pytest.fixture
def keyword_payload() -> dict:
    return {
        "tokens": [{"type": "KEYWORD", "value": "def", "line": 1, "column": 1}],
        "syntaxErrors": [],
        "semanticErrors": [],
    }


@pytest.fixture
def fake_client() -> MagicMock:
    """Stands in for AnalysisClient; tests set submit's return value or side effect."""
    client = MagicMock()
    client.submit.return_value = AnalysisResult.from_payload({})
    return client


@pytest.fixture
def app(fake_client):
    return create_app({"TESTING": True, "SECRET_KEY": "test"}, client=fake_client)


@pytest.fixture
def web(app):
    return app.test_client()
