from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from tabular_chatbot.core.registry import (
    DatasetRegistry,
    load_salon_registry,
    load_tips_registry,
)


@dataclass(frozen=True)
class AssistantProfile:
    """One chat front-end: its command vocabulary, canned messages and paging choices."""
    key: str
    title: str
    welcome_message: str
    help_message: str
    input_placeholder: str
    page_size_options: Tuple[int, ...]
    default_page_size: int
    load_registry: Callable[..., DatasetRegistry]

    @property
    def registry(self) -> DatasetRegistry:
        return self.load_registry()


TIPS = AssistantProfile(
    key="tips",
    title="Tips & Exercises",
    welcome_message=(
        "Type 'hair tips' for hairstyling tips, 'nutrition tips' for nutrition advice, "
        "or 'leg exercises' for leg workout ideas."
    ),
    help_message=(
        "I'm sorry, I don't understand that command. Try 'hair tips' for hairstyling tips, "
        "'nutrition tips' for nutrition advice, or 'leg exercises' for leg workout ideas."
    ),
    input_placeholder="Type 'hair tips', 'nutrition tips', or 'leg exercises'...",
    page_size_options=(5, 10, 15, 20),
    default_page_size=10,
    load_registry=load_tips_registry,
)

SALON = AssistantProfile(
    key="salon",
    title="Salon Client Info System",
    welcome_message="Welcome to the Salon Client Info System. Type 'show clients' to see the client table.",
    help_message="I'm sorry, I don't understand that command. Type 'show clients' to see the client table.",
    input_placeholder="Type 'show clients'...",
    page_size_options=(10, 20, 30, 40, 50),
    default_page_size=10,
    load_registry=load_salon_registry,
)

ASSISTANTS: Dict[str, AssistantProfile] = {p.key: p for p in (TIPS, SALON)}


def get_assistant(key: str) -> AssistantProfile:
    try:
        return ASSISTANTS[str(key).strip().lower()]
    except KeyError:
        raise KeyError(f"Unknown assistant {key!r}. Available: {sorted(ASSISTANTS)}") from None


def load_all_registries() -> Dict[str, DatasetRegistry]:
    """Build every assistant's registry up front so seed-data errors surface at startup."""
    return {key: profile.registry for key, profile in ASSISTANTS.items()}
