"""
Validation helpers for the Property Catalog API.
Turns pydantic error lists into the single human-readable message returned to clients.
"""

from typing import Any, Dict, Iterable, List

# Request parts FastAPI prefixes to error locations
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}

# Upper bound of the integer primary key columns
MAX_ID = 2**31 - 1


class ValidationUtils:
    """
    Utility class for formatting validation errors.
    """

    @staticmethod
    def format_location(loc: Iterable[Any]) -> str:
        """
        Render an error location as a dotted field path.

        ("body", "images", 0) -> "images.0"
        """
        parts = [str(part) for part in loc]
        if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
            parts = parts[1:]
        return ".".join(parts)

    @staticmethod
    def collect_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Convert pydantic error dicts into response details.

        Input values are deliberately left out so passwords never echo back.
        """
        details = []
        for error in errors:
            details.append({
                "field": ValidationUtils.format_location(error.get("loc", ())) or None,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type"),
            })
        return details

    @staticmethod
    def first_error_message(errors: Iterable[Dict[str, Any]]) -> str:
        """
        Message describing the first violated constraint.
        """
        for detail in ValidationUtils.collect_errors(errors):
            if detail["field"]:
                return f"{detail['field']}: {detail['message']}"
            return detail["message"]
        return "Invalid request"

