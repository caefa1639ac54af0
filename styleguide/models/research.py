"""Transient blog research records: search results and the brief built from them."""

from typing import TypedDict


class ResearchSource(TypedDict):
    url: str
    title: str
    description: str
    markdown: str


class ResearchNotes(TypedDict):
    summary: str
    urls: list[str]
    sources: list[ResearchSource]
