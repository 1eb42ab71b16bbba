"""Error response schema.

Every rewritten error response uses the same body:
{"type": "Error", "title": "...", "description": "..."}.
"""

from typing import Literal

from pydantic import BaseModel


class HydraError(BaseModel):
    """Problem description sent to clients in place of the framework's error body."""

    type: Literal["Error"] = "Error"
    title: str
    description: str
