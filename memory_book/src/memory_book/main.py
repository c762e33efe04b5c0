"""
Streamlit page for the memory book guessing game.

Players identify themselves, then read each memory and guess who wrote it:
- Identification gate (URL parameters or cached identity)
- Shuffled memory cards with guess forms
- Reveal-all and collapse/expand controls
- Session scoreboard in the sidebar
"""

from typing import List, Optional

import streamlit as st
from loguru import logger

from memory_book.api import FetchFailed, MemorySourceClient
from memory_book.charts import create_guess_outcome_chart
from memory_book.config import get_settings
from memory_book.models import Identity, Memory
from memory_book.services import (
    GameState,
    IdentityManager,
    InvalidIdentity,
    MemoryStore,
    guess_history,
    reduce,
    submit_guess,
    summarize_guesses,
)
from memory_book.services.guess_state import (
    Action,
    ToggleCollapse,
    ToggleExpandGuessed,
    ToggleRevealAll,
)
from memory_book.services.identity import create_identity_cache
from memory_book.utils.logging import setup_logging


def setup_page_config() -> None:
    """Configure Streamlit page settings."""
    settings = get_settings()
    st.set_page_config(
        page_title=f"{settings.honoree_name}'s Memory Book",
        page_icon="📖",
        layout="centered",
        initial_sidebar_state="collapsed"
    )


@st.cache_resource
def get_api_client() -> MemorySourceClient:
    """Get or create API client instance (cached)."""
    settings = get_settings()
    return MemorySourceClient(
        source_url=settings.memory_source_url,
        timeout=settings.memory_source_timeout,
        retries=settings.memory_source_retries
    )


def initialize_session_state() -> None:
    """Initialize Streamlit session state variables."""
    if "game_state" not in st.session_state:
        st.session_state.game_state = GameState()

    if "memories" not in st.session_state:
        st.session_state.memories = None

    if "load_error" not in st.session_state:
        st.session_state.load_error = None

    if "submission_error" not in st.session_state:
        st.session_state.submission_error = None

    if "image_index" not in st.session_state:
        st.session_state.image_index = {}


def get_identity_manager() -> IdentityManager:
    return IdentityManager(create_identity_cache(st.session_state), st.query_params)


def dispatch(action: Action) -> None:
    st.session_state.game_state = reduce(st.session_state.game_state, action)


def load_memories() -> None:
    """Fetch a fresh, reshuffled memory list for this session."""
    store = MemoryStore(get_api_client())
    try:
        with st.spinner("Loading memories..."):
            st.session_state.memories = store.load()
        st.session_state.load_error = None
    except FetchFailed as e:
        logger.error(f"Error fetching memories: {e.message}")
        st.session_state.memories = None
        st.session_state.load_error = e.message


def reset_session() -> None:
    """Drop memories and guesses so the next run fetches everything again."""
    st.session_state.memories = None
    st.session_state.load_error = None
    st.session_state.game_state = GameState()
    st.session_state.image_index = {}


def handle_guess_submit(memory: Memory, guess: str, identity: Identity) -> None:
    """Record a guess locally, then send it to the memory source."""
    outcome = submit_guess(get_api_client(), st.session_state.game_state, memory, guess, identity)
    st.session_state.game_state = outcome.state
    if outcome.error:
        st.session_state.submission_error = outcome.error


def render_identification_form(manager: IdentityManager) -> None:
    """Render the form that gates the memory book."""
    settings = get_settings()
    st.header(f"Welcome to {settings.honoree_name}'s Memory Book!")
    st.write(
        "Before you start guessing, please let us know who you are. "
        "This helps us keep track of everyone's guesses!"
    )

    with st.form("identification"):
        name = st.text_input("Your Name", placeholder="Enter your name")
        email = st.text_input("Your Email", placeholder="Enter your email")
        submitted = st.form_submit_button("Start Guessing", use_container_width=True)

    if submitted:
        try:
            manager.identify(name, email)
            st.rerun()
        except InvalidIdentity as e:
            st.error(str(e))


def render_header(identity: Identity, manager: IdentityManager) -> None:
    settings = get_settings()
    col1, col2 = st.columns([3, 2])
    with col1:
        st.title(f"{settings.honoree_name}'s Memory Book")
    with col2:
        st.markdown(f"**Playing as:** {identity.name}")
        st.button("(Switch Player)", on_click=manager.logout)


def render_controls(state: GameState) -> None:
    """Render the reveal-all, bulk collapse and refresh controls."""
    col1, col2, col3 = st.columns(3)
    with col1:
        st.button(
            "Hide All" if state.reveal_all else "Expand All",
            on_click=dispatch,
            args=(ToggleRevealAll(),),
            use_container_width=True
        )
    with col2:
        if state.guessed_count > 0:
            st.button(
                "Collapse Guessed" if state.guessed_expanded else "Expand Guessed",
                on_click=dispatch,
                args=(ToggleExpandGuessed(),),
                use_container_width=True
            )
    with col3:
        st.button("🔄 Refresh memories", on_click=reset_session, use_container_width=True)


def _step_image(memory_id: str, step: int, count: int) -> None:
    current = st.session_state.image_index.get(memory_id, 0)
    st.session_state.image_index[memory_id] = (current + step) % count


def render_image_carousel(memory: Memory) -> None:
    """Render the memory's images one at a time with previous/next controls."""
    if not memory.image_refs:
        return

    urls = memory.image_urls
    if not urls:
        st.caption("No image available")
        return

    index = st.session_state.image_index.get(memory.id, 0) % len(urls)
    st.image(urls[index], caption=f"Memory image {index + 1}")

    if len(urls) > 1:
        col1, col2, col3 = st.columns([1, 2, 1])
        with col1:
            st.button("◀", key=f"prev-{memory.id}", on_click=_step_image, args=(memory.id, -1, len(urls)))
        with col2:
            st.caption(f"{index + 1} / {len(urls)}")
        with col3:
            st.button("▶", key=f"next-{memory.id}", on_click=_step_image, args=(memory.id, 1, len(urls)))


def render_answer(memory: Memory, state: GameState) -> None:
    guess = state.guess_for(memory.id)
    if guess.guess_text:
        st.markdown(f"**Your guess:** {guess.guess_text}")
    st.markdown(f"**Written by:** {memory.author_name}")
    if guess.guess_text:
        if guess.is_correct:
            st.success("✓ Correct guess!")
        else:
            st.error("✗ Not quite right!")


def render_guess_form(memory: Memory, state: GameState, identity: Identity) -> None:
    submitting = state.submitting == memory.id
    with st.form(key=f"guess-{memory.id}", clear_on_submit=False):
        col1, col2 = st.columns([3, 1])
        with col1:
            guess = st.text_input(
                "Your guess",
                placeholder="Guess who wrote this...",
                key=f"guess-text-{memory.id}",
                label_visibility="collapsed",
                disabled=submitting
            )
        with col2:
            submitted = st.form_submit_button(
                "Submitting..." if submitting else "Submit Guess",
                disabled=submitting,
                use_container_width=True
            )

    if submitted and guess.strip():
        handle_guess_submit(memory, guess, identity)
        st.rerun()


def render_memory(memory: Memory, state: GameState, identity: Identity) -> None:
    """Render one memory card."""
    answered = state.has_guessed(memory.id)
    collapsed = state.is_collapsed(memory.id)
    guess = state.guess_for(memory.id)

    with st.container(border=True):
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(memory.text)
        with col2:
            if answered:
                st.button(
                    "Expand" if collapsed else "Collapse",
                    key=f"collapse-{memory.id}",
                    on_click=dispatch,
                    args=(ToggleCollapse(memory_id=memory.id),)
                )

        if answered and collapsed and guess.guess_text:
            mark = "✓" if guess.is_correct else "✗"
            st.markdown(f"{mark} **Guessed:** {guess.guess_text}")

        if state.show_image(memory):
            render_image_carousel(memory)

        if answered and not collapsed:
            render_answer(memory, state)

        if not answered:
            render_guess_form(memory, state, identity)


def render_sidebar(memories: List[Memory], state: GameState, identity: Identity) -> None:
    """Render the player's scoreboard."""
    st.sidebar.title("📖 Your Score")
    st.sidebar.markdown(f"Playing as **{identity.name}**")

    summary = summarize_guesses(memories, state)

    col1, col2 = st.sidebar.columns(2)
    with col1:
        st.metric("Guessed", f"{summary['guessed']}/{summary['total_memories']}")
    with col2:
        st.metric("Accuracy", f"{summary['accuracy']:.0%}")

    st.sidebar.plotly_chart(create_guess_outcome_chart(summary), use_container_width=True)

    history = guess_history(memories, state)
    if history:
        with st.sidebar.expander("📋 Your Guesses", expanded=False):
            st.dataframe(history, use_container_width=True, hide_index=True)


def main() -> None:
    """Main memory book application."""
    setup_page_config()
    setup_logging()
    initialize_session_state()

    if st.session_state.memories is None and st.session_state.load_error is None:
        load_memories()

    if st.session_state.load_error:
        st.error(f"Error: {st.session_state.load_error}")
        st.button("Retry", on_click=reset_session)
        st.stop()

    manager = get_identity_manager()
    identity: Optional[Identity] = manager.resolve()

    if identity is None:
        render_identification_form(manager)
        st.stop()

    memories: List[Memory] = st.session_state.memories
    state: GameState = st.session_state.game_state

    render_header(identity, manager)
    render_sidebar(memories, state, identity)

    if st.session_state.submission_error:
        st.error(st.session_state.submission_error)
        st.session_state.submission_error = None

    render_controls(state)

    if not memories:
        st.info("No memories to guess yet. Check back soon!")

    for memory in memories:
        render_memory(memory, state, identity)

    st.markdown("---")
    st.markdown(f"*Made with love for {get_settings().honoree_name}*")


if __name__ == "__main__":
    main()
