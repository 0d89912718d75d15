from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from tabular_chatbot.conversation.assistants import AssistantProfile
from tabular_chatbot.conversation.dispatcher import (
    CommandDispatcher,
    DatasetSelected,
    DispatchResult,
)
from tabular_chatbot.core.query_engine import Query, QueryResult, clamp_page, evaluate, toggle_sort
from tabular_chatbot.core.schema import Dataset

logger = logging.getLogger(__name__)


@dataclass
class ChatMessage:
    text: str
    is_bot: bool


@dataclass
class SessionState:
    """
    Per-user conversation and table state.

    Owned by the presentation layer (one per browser session) and passed
    into the actions below. The core never keeps a reference to it.
    """
    messages: List[ChatMessage] = field(default_factory=list)
    active_keyword: Optional[str] = None
    query: Query = field(default_factory=Query)
    table_visible: bool = False


def new_session(profile: AssistantProfile) -> SessionState:
    return SessionState(
        messages=[ChatMessage(profile.welcome_message, is_bot=True)],
        query=Query.reset(page_size=profile.default_page_size),
    )


def submit(session: SessionState, profile: AssistantProfile, raw_input: str) -> Optional[DispatchResult]:
    """
    Handle one chat submission.

    Returns None when the input is blank (nothing is appended). A recognized
    command selects its dataset, resets the query and appends only the
    dataset's reply, if it has one. Anything else is echoed as a user message
    followed by the assistant's help message, and the table is left untouched.
    """
    if not (raw_input or "").strip():
        return None

    registry = profile.registry
    result = CommandDispatcher(registry).dispatch(raw_input)

    if isinstance(result, DatasetSelected):
        dataset = registry.resolve(result.keyword)
        session.active_keyword = result.keyword
        session.query = Query.reset(page_size=session.query.page_size)
        session.table_visible = True
        if dataset is not None and dataset.reply:
            session.messages.append(ChatMessage(dataset.reply, is_bot=True))
        return result

    session.messages.append(ChatMessage(raw_input, is_bot=False))
    session.messages.append(ChatMessage(profile.help_message, is_bot=True))
    return result


def active_dataset(session: SessionState, profile: AssistantProfile) -> Optional[Dataset]:
    if session.active_keyword is None:
        return None
    return profile.registry.resolve(session.active_keyword)


def current_result(session: SessionState, profile: AssistantProfile) -> Optional[QueryResult]:
    dataset = active_dataset(session, profile)
    if dataset is None or not session.table_visible:
        return None
    return evaluate(dataset, session.query)


# ---------------------------------------------------------------------------
# Table actions (last write wins)
# ---------------------------------------------------------------------------

def set_search(session: SessionState, term: str) -> None:
    session.query = session.query.with_search(term).with_page(1)


def set_filter(session: SessionState, field_name: str, value: Optional[str]) -> None:
    session.query = session.query.with_filter(field_name, value).with_page(1)


def set_date_range(session: SessionState, start: Optional[str], end: Optional[str]) -> None:
    session.query = session.query.with_date_range(start, end).with_page(1)


def click_header(session: SessionState, field_name: str) -> None:
    session.query = toggle_sort(session.query, field_name)


def go_to_page(session: SessionState, page: int) -> None:
    session.query = session.query.with_page(max(1, int(page)))


def set_page_size(session: SessionState, page_size: int) -> None:
    session.query = session.query.with_page_size(page_size)


def clamp_to_result(session: SessionState, result: QueryResult) -> bool:
    """
    Pull the page back into range after the result shrank under it.

    Returns True when the query changed, so the caller can re-evaluate.
    """
    page = clamp_page(session.query.page, result.page_count)
    if page == session.query.page:
        return False
    session.query = session.query.with_page(page)
    return True
