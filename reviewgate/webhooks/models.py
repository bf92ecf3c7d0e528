from pydantic import BaseModel, Field


class WebhookResponse(BaseModel):
    """Standardized response model for the webhook endpoint."""

    status: str = Field(..., description="Processing status: pass, fail, error, ignored")
    detail: str | None = Field(None, description="Additional context or error message")
    event_type: str | None = Field(None, description="GitHub event type from the X-GitHub-Event header")
    verdict: str | None = Field(None, description="approved, overridden or rejected when evaluated")
    review_action: str | None = Field(None, description="Review posted to reflect the verdict")
