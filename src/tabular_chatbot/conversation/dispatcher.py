from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from tabular_chatbot.core.registry import DatasetRegistry, normalize_keyword

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetSelected:
    keyword: str


@dataclass(frozen=True)
class Unrecognized:
    raw_input: str

    @property
    def is_blank(self) -> bool:
        return not self.raw_input.strip()


DispatchResult = Union[DatasetSelected, Unrecognized]


def normalize_command(raw_input: str) -> str:
    return normalize_keyword(raw_input)


class CommandDispatcher:
    """
    Maps raw chat input to a dataset selection.

    Matching is exact equality against the registry's keywords after trimming
    and lower-casing: "  Hair Tips " selects "hair tips", while "hair tip"
    and "show hair tips" do not match anything.
    """

    def __init__(self, registry: DatasetRegistry) -> None:
        self.registry = registry

    def dispatch(self, raw_input: str) -> DispatchResult:
        command = normalize_command(raw_input)
        if command and command in self.registry:
            logger.info("Command recognized: %r", command)
            return DatasetSelected(keyword=command)

        if command:
            logger.info("Command not understood: %r", command)
        return Unrecognized(raw_input=raw_input or "")
