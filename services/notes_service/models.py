"""
Note records served by /api/v1/xhs/notes.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}


@dataclass
class NoteListItem:
    """Row of the notes list"""
    note_id: str
    note_url: Optional[str] = None
    note_cover_url_default: Optional[str] = None
    note_display_title: Optional[str] = None
    note_liked_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    collected_count: int = 0
    author_id: Optional[str] = None
    author_nick_name: Optional[str] = None
    author_avatar: Optional[str] = None
    note_create_time: Optional[str] = None
    note_last_update_time: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NoteListItem':
        return cls(**_known_fields(cls, data))


@dataclass
class NotesPage:
    """Page-numbered list response"""
    items: List[NoteListItem] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NotesPage':
        return cls(
            items=[NoteListItem.from_dict(item) for item in data.get("items") or []],
            total=int(data.get("total") or 0),
            page=int(data.get("page") or 1),
            page_size=int(data.get("page_size") or 20)
        )


@dataclass
class NoteBasic:
    """Basic details of a single note"""
    note_id: str
    note_url: Optional[str] = None
    note_display_title: Optional[str] = None
    note_cover_url_default: Optional[str] = None
    note_liked_count: Optional[int] = None
    comment_count: Optional[int] = None
    share_count: Optional[int] = None
    collected_count: Optional[int] = None
    note_desc: Optional[str] = None
    note_create_time: Optional[str] = None
    note_last_update_time: Optional[str] = None
    note_image_list: Optional[List[Dict[str, Any]]] = None
    note_tags: Optional[List[str]] = None
    video_h264_url: Optional[str] = None
    # The backend spells these "auther"
    auther_user_id: Optional[str] = None
    auther_nick_name: Optional[str] = None
    auther_avatar: Optional[str] = None
    auther_home_page_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NoteBasic':
        return cls(**_known_fields(cls, data))


@dataclass
class NoteAuthor:
    """Author profile of a note"""
    user_id: str
    nick_name: Optional[str] = None
    avatar: Optional[str] = None
    desc: Optional[str] = None
    ip_location: Optional[str] = None
    fans: Optional[str] = None
    follows: Optional[str] = None
    gender: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NoteAuthor':
        return cls(**_known_fields(cls, data))


@dataclass
class KeywordGroupItem:
    """Keyword group under which the note was retrieved"""
    group_id: int
    group_name: str
    keywords: List[str] = field(default_factory=list)
    retrieved_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'KeywordGroupItem':
        group = data.get("keyword_group") or {}
        return cls(
            group_id=group.get("group_id"),
            group_name=group.get("group_name") or "",
            keywords=group.get("keywords") or [],
            retrieved_at=data.get("retrieved_at")
        )
