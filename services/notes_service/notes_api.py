"""
Notes listing and detail endpoints.
"""

from typing import Any, Dict, List, Optional

from services.api_service.client import ApiClient
from services.notes_service.models import (
    KeywordGroupItem,
    NoteAuthor,
    NoteBasic,
    NotesPage,
)

NOTES_PATH = "/api/v1/xhs/notes"

# Detail sections returned as raw records
RAW_SECTIONS = ("comments", "llm-diagnoses", "tag-comparisons", "comment-analyses")


class NotesApi:
    """Wrapper for /api/v1/xhs/notes/*"""

    def __init__(self, client: ApiClient):
        self.client = client

    def list_notes(self, params: Optional[Dict[str, Any]] = None) -> NotesPage:
        return NotesPage.from_dict(self.client.get(f"{NOTES_PATH}/", params or {}))

    def get_basic(self, note_id: str) -> NoteBasic:
        return NoteBasic.from_dict(self.client.get(f"{NOTES_PATH}/{note_id}/basic"))

    def get_author(self, note_id: str) -> NoteAuthor:
        return NoteAuthor.from_dict(self.client.get(f"{NOTES_PATH}/{note_id}/author"))

    def get_keyword_groups(self, note_id: str) -> List[KeywordGroupItem]:
        data = self.client.get(f"{NOTES_PATH}/{note_id}/keyword-groups")
        return [KeywordGroupItem.from_dict(item) for item in data or []]

    def get_section(self, note_id: str, section: str) -> List[Dict[str, Any]]:
        if section not in RAW_SECTIONS:
            raise ValueError(f"Unknown note section: {section}")
        return list(self.client.get(f"{NOTES_PATH}/{note_id}/{section}") or [])

    def get_comments(self, note_id: str) -> List[Dict[str, Any]]:
        return self.get_section(note_id, "comments")

    def get_llm_diagnoses(self, note_id: str) -> List[Dict[str, Any]]:
        return self.get_section(note_id, "llm-diagnoses")

    def get_tag_comparisons(self, note_id: str) -> List[Dict[str, Any]]:
        return self.get_section(note_id, "tag-comparisons")

    def get_comment_analyses(self, note_id: str) -> List[Dict[str, Any]]:
        return self.get_section(note_id, "comment-analyses")
