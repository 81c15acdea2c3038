from pydantic import BaseModel
from dayflow.context.suggestions import SmartSuggestion


class ContextDetectRequest(BaseModel):
    active_tab: str
    is_idle: bool = False


class SuggestionsRequest(BaseModel):
    active_tab: str = ""
    is_idle: bool = False


class SuggestionsResponse(BaseModel):
    suggestions: list[SmartSuggestion]
    count: int
