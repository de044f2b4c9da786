"""
Pydantic schemas shared by several routers. JSON keys are camelCase.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from signnova.services.pagination import Page

SignLanguage = Literal['ASL', 'BSL', 'ISL', 'LSF', 'GSL']
Difficulty = Literal['beginner', 'intermediate', 'advanced']


class ApiModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class RequestModel(ApiModel):
    model_config = ConfigDict(extra='forbid')


class SignResponse(ApiModel):
    id: str
    word: str
    language: str
    category: str
    difficulty: str
    video_url: str
    thumbnail: str
    description: str | None = None
    related_signs: list[str] = []
    created_at: datetime
    updated_at: datetime


class SignSummary(ApiModel):
    id: str
    word: str
    video_url: str
    thumbnail: str


class PaginationResponse(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> 'PaginationResponse':
        return cls(page=page.page, limit=page.limit, total=page.total, total_pages=page.total_pages)


class MessageResponse(ApiModel):
    success: bool = True
    message: str
