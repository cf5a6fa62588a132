"""Portfolio chat - Streamlit interface.

Thin client for the portfolio assistant API. All business logic lives in the
FastAPI backend. This file handles:
  - Conversation state in st.session_state
  - Suggested starter questions
  - POST /api/chat with the full history, with loading and error states
  - Owner profile in the sidebar from GET /api/portfolio
"""

import os

import requests
import streamlit as st

# Config
API_URL = os.environ.get("API_URL", "http://localhost:3001")
CHAT_ENDPOINT = f"{API_URL}/api/chat"
PORTFOLIO_ENDPOINT = f"{API_URL}/api/portfolio"
HEALTH_ENDPOINT = f"{API_URL}/health"

SUGGESTED_QUESTIONS = [
    "What are the main AI skills?",
    "Tell me about the best project",
    "What's the work experience?",
    "Why should I hire them?",
]

CONNECTION_ERROR = "Sorry, I'm having trouble connecting right now. Please try again in a moment."

st.set_page_config(page_title="Portfolio Assistant", layout="centered")


@st.cache_data(ttl=300)
def fetch_profile() -> dict:
    """Load the portfolio payload once every few minutes."""
    try:
        resp = requests.get(PORTFOLIO_ENDPOINT, timeout=5)
        if resp.status_code == 200:
            return resp.json()
    except requests.RequestException:
        pass  # Sidebar just shows a generic header
    return {}


def welcome_message(owner: str) -> dict:
    return {
        "role": "assistant",
        "content": f"Hi! I'm {owner}'s AI assistant. Ask me anything about their experience, projects, or skills!",
    }


def init_session(owner: str):
    """Initialize session state on first load."""
    if "messages" not in st.session_state:
        st.session_state.messages = [welcome_message(owner)]


def send_message(user_input: str):
    """POST the conversation to the backend and append the reply."""
    st.session_state.messages.append({"role": "user", "content": user_input})
    with st.chat_message("user"):
        st.markdown(user_input)

    # The welcome turn is client-side only
    history = st.session_state.messages[1:]

    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            try:
                resp = requests.post(CHAT_ENDPOINT, json={"messages": history}, timeout=60)
                body = resp.json()
                if resp.status_code == 200:
                    reply = body.get("content", "")
                else:
                    reply = body.get("error", CONNECTION_ERROR)
            except (requests.RequestException, ValueError):
                reply = CONNECTION_ERROR

        st.markdown(reply)

    st.session_state.messages.append({"role": "assistant", "content": reply})


def main():
    """Run the Streamlit chat application."""
    profile = fetch_profile()
    info = profile.get("personalInfo", {})
    owner = info.get("name", "the portfolio owner")

    init_session(owner)

    st.title(f"Ask about {owner}")
    if info.get("title"):
        st.caption(info["title"])

    with st.sidebar:
        st.markdown("### About")
        st.markdown(profile.get("about", {}).get("introduction", ""))
        if info.get("location"):
            st.markdown(f"**Location:** {info['location']}")
        if info.get("linkedin"):
            st.markdown(f"[LinkedIn]({info['linkedin']})")

        st.divider()
        if st.button("New Conversation", use_container_width=True):
            st.session_state.messages = [welcome_message(owner)]
            st.rerun()

    for msg in st.session_state.messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    # Starter questions only before the first visitor turn
    pending = None
    if len(st.session_state.messages) == 1:
        cols = st.columns(2)
        for i, question in enumerate(SUGGESTED_QUESTIONS):
            if cols[i % 2].button(question, use_container_width=True):
                pending = question

    if user_input := st.chat_input("Ask me anything..."):
        pending = user_input

    if pending:
        send_message(pending[:2000])


if __name__ == "__main__":
    main()
