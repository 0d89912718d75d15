from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from tabular_chatbot.config import APP_NAME, APP_VERSION, DEFAULT_ASSISTANT
from tabular_chatbot.conversation.assistants import (
    ASSISTANTS,
    AssistantProfile,
    get_assistant,
    load_all_registries,
)
from tabular_chatbot.conversation.dispatcher import DatasetSelected
from tabular_chatbot.conversation.session import (
    SessionState,
    active_dataset,
    clamp_to_result,
    click_header,
    current_result,
    go_to_page,
    new_session,
    set_date_range,
    set_filter,
    set_page_size,
    set_search,
    submit,
)
from tabular_chatbot.core.query_engine import QueryEngineError, active_filters, filter_options
from tabular_chatbot.core.schema import Dataset
from tabular_chatbot.ui.formatting import column_header, header_label, page_caption, result_to_frame

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Something went wrong while preparing that table. Please try another command."


def _get_session(profile: AssistantProfile) -> SessionState:
    key = f"session_{profile.key}"
    if key not in st.session_state:
        st.session_state[key] = new_session(profile)
    return st.session_state[key]


def _widget_key(profile: AssistantProfile, name: str) -> str:
    # Bumped on every recognized command so filter widgets start empty again.
    generation = st.session_state.get(f"generation_{profile.key}", 0)
    return f"{profile.key}_{generation}_{name}"


def _bump_generation(profile: AssistantProfile) -> None:
    key = f"generation_{profile.key}"
    st.session_state[key] = st.session_state.get(key, 0) + 1


def _handle_chat_input(profile: AssistantProfile, session: SessionState) -> None:
    prompt = st.chat_input(profile.input_placeholder)
    if prompt is None:
        return
    result = submit(session, profile, prompt)
    if isinstance(result, DatasetSelected):
        _bump_generation(profile)


def _render_messages(session: SessionState) -> None:
    for message in session.messages:
        with st.chat_message("assistant" if message.is_bot else "user"):
            st.write(message.text)


def _render_controls(profile: AssistantProfile, session: SessionState, dataset: Dataset) -> None:
    schema = dataset.schema
    cols = st.columns([3] + [2] * len(schema.filterable_fields) + [2] * (2 if schema.date_fields else 0))

    with cols[0]:
        term = st.text_input(
            "Search",
            key=_widget_key(profile, "search"),
            placeholder=f"Search {dataset.title.lower()}...",
        )
    if term != session.query.search_term:
        set_search(session, term)

    for i, f in enumerate(schema.filterable_fields, start=1):
        all_label = f"All {header_label(f.name)}"
        options = [""] + filter_options(dataset, f.name)
        with cols[i]:
            choice = st.selectbox(
                header_label(f.name),
                options=options,
                format_func=lambda v, a=all_label: v or a,
                key=_widget_key(profile, f"filter_{f.name}"),
            )
        if choice != session.query.field_filters.get(f.name, ""):
            set_filter(session, f.name, choice)

    if schema.date_fields:
        offset = 1 + len(schema.filterable_fields)
        with cols[offset]:
            start = st.date_input("From", value=None, key=_widget_key(profile, "date_start"))
        with cols[offset + 1]:
            end = st.date_input("To", value=None, key=_widget_key(profile, "date_end"))
        start_iso = start.isoformat() if start else None
        end_iso = end.isoformat() if end else None
        current = session.query.date_range
        if (start_iso, end_iso) != (current.start, current.end):
            set_date_range(session, start_iso, end_iso)


def _render_table(profile: AssistantProfile, session: SessionState, dataset: Dataset) -> None:
    try:
        result = current_result(session, profile)
    except QueryEngineError:
        logger.exception("Query failed for %r with %s", dataset.keyword, session.query)
        st.write(ERROR_MESSAGE)
        return
    if result is None:
        return
    if clamp_to_result(session, result):
        st.rerun()

    query = session.query
    header_cols = st.columns(len(dataset.schema))
    for col, f in zip(header_cols, dataset.schema):
        with col:
            label = column_header(f.name, query.sort_key, query.sort_direction)
            if st.button(label, key=_widget_key(profile, f"sort_{f.name}"), use_container_width=True):
                click_header(session, f.name)
                st.rerun()

    st.dataframe(result_to_frame(dataset.schema, result), use_container_width=True, hide_index=True)

    filters = active_filters(query)
    if filters:
        st.caption("Filters: " + ", ".join(f"{header_label(k)} = {v}" for k, v in filters.items()))

    prev_col, caption_col, next_col, size_col = st.columns([1, 2, 1, 1])
    with prev_col:
        if st.button("Previous", disabled=not result.has_previous, key=_widget_key(profile, "prev")):
            go_to_page(session, query.page - 1)
            st.rerun()
    with caption_col:
        st.write(page_caption(result))
    with next_col:
        if st.button("Next", disabled=not result.has_next, key=_widget_key(profile, "next")):
            go_to_page(session, query.page + 1)
            st.rerun()
    with size_col:
        options = list(profile.page_size_options)
        index = options.index(query.page_size) if query.page_size in options else 0
        size = st.selectbox(
            "Rows per page",
            options=options,
            index=index,
            format_func=lambda n: f"Show {n}",
            key=f"{profile.key}_page_size",
        )
        if size != query.page_size:
            set_page_size(session, size)
            st.rerun()


def _select_assistant() -> AssistantProfile:
    keys = list(ASSISTANTS)
    default: Optional[str] = DEFAULT_ASSISTANT if DEFAULT_ASSISTANT in ASSISTANTS else keys[0]
    choice = st.sidebar.radio(
        "Assistant",
        options=keys,
        index=keys.index(default),
        format_func=lambda k: ASSISTANTS[k].title,
    )
    return get_assistant(choice)


def run_app() -> None:
    st.set_page_config(page_title=APP_NAME, page_icon="💬", layout="wide")
    st.title(APP_NAME)
    st.caption(f"Prototype version {APP_VERSION}")

    # Seed data is parsed before the first render; a malformed seed stops the app here.
    load_all_registries()

    profile = _select_assistant()
    session = _get_session(profile)

    _handle_chat_input(profile, session)
    _render_messages(session)

    if not session.table_visible:
        return

    dataset = active_dataset(session, profile)
    if dataset is None:
        return

    st.subheader(dataset.title)
    _render_controls(profile, session, dataset)
    _render_table(profile, session, dataset)
