from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ContextOptions(BaseModel):
    """Where clients can find the JSON-LD context document for error payloads."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # URI path of the context document, e.g. "/error.jsonld"
    # StrictStr so that None or numbers are rejected instead of coerced.
    path: StrictStr = Field(min_length=1)


class HydraErrorOptions(BaseModel):
    """Options accepted by ``hydra_error.register``.

    Validated once at registration and frozen afterwards, so the same
    instance can be read by every request without copying. Unknown keys are
    rejected so a mistyped option fails at startup.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    context: ContextOptions
