"""
Notes browsing: filterable list and a detail view with lazily loaded sections.
"""

from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

import streamlit as st

from services.api_service.errors import ApiError, user_message
from services.auth_service.route_guard import require_auth
from services.notes_service.models import NoteListItem
from services.query_service.paginated_query import (
    PAGE_STYLE,
    ListResult,
    PaginatedList,
    PaginatedQuery,
)
from services.ui_service.components import (
    format_datetime,
    render_list_error,
    render_pagination,
    render_sort_headers,
    render_table,
)
from services.ui_service.context import PageContext
from utils.logging_config import get_logger, log_user_interaction
from utils.translation import t

logger = get_logger(__name__)

NOTES_LIST_KEY = "notes_list"

TEXT_FILTERS = ("note_id", "title", "content", "author_id", "author_name")
NUMERIC_FILTERS = ("min_likes", "max_likes", "min_comments", "max_comments", "min_shares", "max_shares")
DATE_FILTERS = ("start_create_time", "end_create_time", "start_update_time", "end_update_time")
NOTE_FILTERS = TEXT_FILTERS + NUMERIC_FILTERS + DATE_FILTERS

NOTE_SORT_COLUMNS = (
    ("note_liked_count", "点赞"),
    ("comment_count", "评论"),
    ("share_count", "分享"),
    ("collected_count", "收藏"),
    ("note_create_time", "发布时间"),
    ("note_last_update_time", "更新时间"),
)

DETAIL_SECTIONS = {
    "author": "作者",
    "keyword-groups": "关键词组",
    "comments": "评论",
    "llm-diagnoses": "LLM诊断",
    "tag-comparisons": "标签对比",
    "comment-analyses": "评论分析",
}

RECORD_LOADERS = {
    "llm-diagnoses": "get_llm_diagnoses",
    "tag-comparisons": "get_tag_comparisons",
    "comment-analyses": "get_comment_analyses",
}

RECORD_TYPE_FIELDS = {
    "llm-diagnoses": "diagnosis_type",
    "tag-comparisons": "comparison_type",
    "comment-analyses": "analysis_type",
}

FILTER_LABELS = {
    "note_id": "笔记 ID",
    "title": "标题",
    "content": "内容",
    "author_id": "作者 ID",
    "author_name": "作者昵称",
    "min_likes": "最少点赞",
    "max_likes": "最多点赞",
    "min_comments": "最少评论",
    "max_comments": "最多评论",
    "min_shares": "最少分享",
    "max_shares": "最多分享",
    "start_create_time": "发布时间起",
    "end_create_time": "发布时间止",
    "start_update_time": "更新时间起",
    "end_update_time": "更新时间止",
}


def parse_count_filters(raw: Dict[str, str]) -> Tuple[Dict[str, Optional[int]], Dict[str, str]]:
    """
    Convert the min/max text inputs to integers

    Returns (values, errors); blank inputs become None.
    """
    values: Dict[str, Optional[int]] = {}
    errors: Dict[str, str] = {}
    for name in NUMERIC_FILTERS:
        text = (raw.get(name) or "").strip()
        if not text:
            values[name] = None
            continue
        try:
            number = int(text)
        except ValueError:
            errors[name] = f"{FILTER_LABELS[name]}必须是非负整数"
            continue
        if number < 0:
            errors[name] = f"{FILTER_LABELS[name]}必须是非负整数"
            continue
        values[name] = number
    return values, errors


def date_filter_value(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def note_rows(notes: List[NoteListItem]) -> List[Dict[str, Any]]:
    return [
        {
            "笔记 ID": note.note_id,
            "标题": note.note_display_title or "-",
            "作者": note.author_nick_name or "-",
            "点赞": note.note_liked_count,
            "评论": note.comment_count,
            "分享": note.share_count,
            "收藏": note.collected_count,
            "发布时间": format_datetime(note.note_create_time),
            "更新时间": format_datetime(note.note_last_update_time),
        }
        for note in notes
    ]


def build_notes_list(ctx: PageContext) -> PaginatedList:
    query = PaginatedQuery(
        filters={name: None for name in NOTE_FILTERS},
        page_size=ctx.config.pagination.notes_page_size,
        style=PAGE_STYLE,
        default_sort_order=ctx.config.pagination.default_sort_order
    )

    def fetcher(params: Dict[str, Any]) -> ListResult:
        page = ctx.notes_api.list_notes(params)
        return ListResult(items=page.items, total=page.total)

    return PaginatedList(query, fetcher, "notes_list")


def _render_filter_form(plist: PaginatedList):
    filters = plist.query.filters

    with st.form("notes_filter_form"):
        raw: Dict[str, Any] = {}
        for column, name in zip(st.columns(3), ("note_id", "title", "content")):
            with column:
                raw[name] = st.text_input(FILTER_LABELS[name], value=filters.get(name) or "")

        with st.expander("高级筛选"):
            for pair in (NUMERIC_FILTERS[0:2], NUMERIC_FILTERS[2:4], NUMERIC_FILTERS[4:6]):
                for column, name in zip(st.columns(2), pair):
                    with column:
                        current = filters.get(name)
                        raw[name] = st.text_input(FILTER_LABELS[name], value="" if current is None else str(current))
            for column, name in zip(st.columns(2), ("author_id", "author_name")):
                with column:
                    raw[name] = st.text_input(FILTER_LABELS[name], value=filters.get(name) or "")
            for pair in (DATE_FILTERS[0:2], DATE_FILTERS[2:4]):
                for column, name in zip(st.columns(2), pair):
                    with column:
                        current = filters.get(name)
                        raw[name] = st.date_input(
                            FILTER_LABELS[name],
                            value=date.fromisoformat(current) if current else None
                        )

        col1, col2, _ = st.columns([1, 1, 4])
        with col1:
            submitted = st.form_submit_button("筛选", type="primary", use_container_width=True)
        with col2:
            reset = st.form_submit_button("重置", use_container_width=True)

    if reset:
        log_user_interaction(logger, "notes_filter_reset")
        plist.reset_filters()
        return

    if submitted:
        counts, errors = parse_count_filters(raw)
        if errors:
            for message in errors.values():
                st.error(message)
            return
        values: Dict[str, Any] = {name: (raw[name] or "").strip() or None for name in TEXT_FILTERS}
        values.update(counts)
        values.update({name: date_filter_value(raw[name]) for name in DATE_FILTERS})
        log_user_interaction(logger, "notes_filter_apply")
        plist.apply_filters(values)


def _change_page_size(plist: PaginatedList, key: str):
    plist.set_page_size(st.session_state[key])


@require_auth()
def notes_list_page(ctx: PageContext):
    st.title("📒 小红书笔记")

    plist = ctx.page_state(NOTES_LIST_KEY, lambda: build_notes_list(ctx))
    _render_filter_form(plist)

    plist.ensure_loaded()
    render_list_error(plist)

    render_sort_headers(plist, NOTE_SORT_COLUMNS, "notes")
    notes: List[NoteListItem] = plist.items
    if not notes:
        render_table([])
    else:
        # Selection lives in the widget key; a new key forgets it after navigating away
        version = ctx.state.get("notes_table_version", 0)
        event = st.dataframe(
            note_rows(notes),
            use_container_width=True,
            hide_index=True,
            on_select="rerun",
            selection_mode="single-row",
            key=f"notes_table_{version}"
        )
        selected_rows = event.selection.rows
        if selected_rows:
            note = notes[selected_rows[0]]
            ctx.state["notes_table_version"] = version + 1
            log_user_interaction(logger, "note_open", note_id=note.note_id)
            ctx.navigator.push(f"/user/xhs-notes/{note.note_id}")

    render_pagination(plist, "notes")

    options = ctx.config.pagination.page_size_options
    size = plist.query.page_size
    st.selectbox(
        "每页条数",
        options,
        index=options.index(size) if size in options else 0,
        key="notes_page_size",
        on_change=_change_page_size,
        args=(plist, "notes_page_size")
    )


def _section_cache(ctx: PageContext, note_id: str) -> Dict[str, Tuple[Any, Optional[str]]]:
    return ctx.page_state(f"note_sections_{note_id}", dict)


def forget_section(ctx: PageContext, note_id: str, name: str):
    """Drop a cached section so the next run fetches it again"""
    _section_cache(ctx, note_id).pop(name, None)


def _render_section_error(ctx: PageContext, note_id: str, name: str, error: str):
    st.error(error)
    st.button(
        t("actions.retry"),
        key=f"note_retry_{note_id}_{name}",
        on_click=forget_section,
        args=(ctx, note_id, name)
    )


def _load_section(ctx: PageContext, note_id: str, name: str, loader: Callable[[], Any]) -> Tuple[Any, Optional[str]]:
    """
    Fetch a detail section once per note and cache the outcome

    Returns (data, error message). A cached error stays until
    `forget_section` drops it.
    """
    cache = _section_cache(ctx, note_id)
    if name not in cache:
        try:
            with st.spinner(t("messages.info.loading")):
                cache[name] = (loader(), None)
        except ApiError as e:
            ctx.error_tracker.track_error(e, f"note_{name}", note_id=note_id)
            cache[name] = (None, user_message(e))
    return cache[name]


def _render_comment(comment: Dict[str, Any], level: int = 0):
    indent = "　" * level
    nickname = comment.get("comment_user_nickname") or "匿名用户"
    tags = comment.get("comment_show_tags") or []
    author_tag = " · 作者" if "is_author" in tags else ""
    st.markdown(
        f"{indent}**{nickname}**{author_tag} · {format_datetime(comment.get('comment_create_time'))}"
        f" · 👍 {comment.get('comment_like_count') or 0}"
    )
    content = (comment.get("comment_content") or "").strip()
    st.write(f"{indent}{content}" if content else f"{indent}[图片/表情]")
    for reply in comment.get("replies") or []:
        _render_comment(reply, level + 1)


def _render_records(records: List[Dict[str, Any]], type_field: str):
    for record in records:
        title = record.get(type_field) or "-"
        with st.expander(f"{title} · {format_datetime(record.get('created_at'))}"):
            if record.get("content"):
                st.markdown(record["content"])
            if record.get("tags"):
                st.write(" ".join(f"`{tag}`" for tag in record["tags"]))
            extra = {
                key: value for key, value in record.items()
                if key not in ("id", type_field, "content", "tags", "created_at")
            }
            if extra:
                st.json(extra, expanded=False)


@require_auth()
def note_detail_page(ctx: PageContext):
    if st.button("← 返回笔记列表"):
        ctx.navigator.push("/user/xhs-notes")

    note_id = ctx.path_params.get("note_id", "")
    basic, error = _load_section(ctx, note_id, "basic", lambda: ctx.notes_api.get_basic(note_id))
    if error:
        _render_section_error(ctx, note_id, "basic", error)
        return

    st.title(basic.note_display_title or note_id)
    col1, col2 = st.columns([1, 2])
    with col1:
        if basic.note_cover_url_default:
            st.image(basic.note_cover_url_default)
    with col2:
        metrics = (
            ("点赞", basic.note_liked_count),
            ("评论", basic.comment_count),
            ("分享", basic.share_count),
            ("收藏", basic.collected_count),
        )
        for column, (label, value) in zip(st.columns(4), metrics):
            with column:
                st.metric(label, value if value is not None else "-")
        st.write(f"**作者：** {basic.auther_nick_name or '-'}")
        st.caption(
            f"发布于 {format_datetime(basic.note_create_time)} · 更新于 {format_datetime(basic.note_last_update_time)}"
        )
        if basic.note_url:
            st.markdown(f"[查看原文]({basic.note_url})")
    if basic.note_desc:
        st.write(basic.note_desc)
    if basic.note_tags:
        st.write(" ".join(f"`#{tag}`" for tag in basic.note_tags))

    # Only the selected section is fetched
    section = st.radio(
        "详情",
        list(DETAIL_SECTIONS),
        format_func=DETAIL_SECTIONS.get,
        horizontal=True,
        key=f"note_section_{note_id}",
        label_visibility="collapsed"
    )
    st.divider()

    if section == "author":
        _render_author(ctx, note_id)
    elif section == "keyword-groups":
        _render_keyword_groups(ctx, note_id)
    elif section == "comments":
        _render_comments(ctx, note_id)
    else:
        loader = getattr(ctx.notes_api, RECORD_LOADERS[section])
        records, error = _load_section(ctx, note_id, section, lambda: loader(note_id))
        if error:
            _render_section_error(ctx, note_id, section, error)
        elif not records:
            st.caption(t("messages.info.noData"))
        else:
            _render_records(records, RECORD_TYPE_FIELDS[section])


def _render_author(ctx: PageContext, note_id: str):
    author, error = _load_section(ctx, note_id, "author", lambda: ctx.notes_api.get_author(note_id))
    if error:
        _render_section_error(ctx, note_id, "author", error)
        return
    if author.avatar:
        st.image(author.avatar, width=64)
    st.write(f"**{author.nick_name or author.user_id}**")
    st.write(author.desc or "")
    for column, (label, value) in zip(
        st.columns(3),
        (("粉丝", author.fans), ("关注", author.follows), ("IP 属地", author.ip_location))
    ):
        with column:
            st.metric(label, value or "-")


def _render_keyword_groups(ctx: PageContext, note_id: str):
    groups, error = _load_section(ctx, note_id, "keyword-groups", lambda: ctx.notes_api.get_keyword_groups(note_id))
    if error:
        _render_section_error(ctx, note_id, "keyword-groups", error)
    elif not groups:
        st.caption(t("messages.info.noData"))
    else:
        for group in groups:
            st.markdown(f"**{group.group_name}** · {format_datetime(group.retrieved_at)}")
            st.write(" ".join(f"`{keyword}`" for keyword in group.keywords))


def _render_comments(ctx: PageContext, note_id: str):
    comments, error = _load_section(ctx, note_id, "comments", lambda: ctx.notes_api.get_comments(note_id))
    if error:
        _render_section_error(ctx, note_id, "comments", error)
    elif not comments:
        st.caption(t("messages.info.noData"))
    else:
        st.subheader(f"评论 ({len(comments)})")
        for comment in comments:
            _render_comment(comment)
            st.divider()
