"""Markdown editor helpers: preview rendering and HTML-to-markdown serialization."""

from __future__ import annotations

from fastapi import APIRouter

from gencomputer.runtime.models.api import (
    MarkdownRenderRequest,
    MarkdownRenderResponse,
    MarkdownSerializeRequest,
    MarkdownSerializeResponse,
)
from gencomputer.runtime.rendering import html_to_markdown, render_markdown

router = APIRouter(prefix="/markdown", tags=["markdown"])


@router.post("/render", response_model=MarkdownRenderResponse)
async def render(body: MarkdownRenderRequest) -> MarkdownRenderResponse:
    return MarkdownRenderResponse(html=render_markdown(body.markdown))


@router.post("/serialize", response_model=MarkdownSerializeResponse)
async def serialize(body: MarkdownSerializeRequest) -> MarkdownSerializeResponse:
    return MarkdownSerializeResponse(markdown=html_to_markdown(body.html))
