"""Help page generation.

Every router answers ``help`` with a Block Kit listing of its commands. Pages
are built once when the router is constructed.
"""

import copy
from types import MappingProxyType
from typing import Iterable


# Name the catch-all command is listed (and sorted) under
CATCH_ALL_PLACEHOLDER = "<command>"
DEFAULT_HELP_TEXT = "No help text provided."

DIVIDER = {"type": "divider"}


def command_blocks(router_name: str, command_name: str, help_text: str | None) -> list[dict]:
    """Blocks describing a single command."""
    return [
        {
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": f"_*/{router_name.lower()} {command_name}*_",
                }
            ],
        },
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": help_text or DEFAULT_HELP_TEXT,
            },
        },
    ]


def header_block(router_name: str) -> dict:
    return {
        "type": "section",
        "text": {
            "type": "mrkdwn",
            "text": f"*_{router_name} supports the following commands_*:",
        },
    }


class HelpPages:
    """Compiled help: one page per command plus the aggregate listing.

    Pages are handed out as deep copies so callers can't alter the compiled
    originals.
    """

    def __init__(self, router_name: str, entries: Iterable[tuple[str, str | None]]):
        self.router_name = router_name

        pages = {}
        for name, help_text in sorted(entries, key=lambda entry: entry[0]):
            pages[name] = command_blocks(router_name, name, help_text)
        self._pages = MappingProxyType(pages)

        sections = [[header_block(router_name)], *pages.values()]
        blocks = []
        for i, section in enumerate(sections):
            if i:
                blocks.append(DIVIDER)
            blocks.extend(section)
        self._aggregate = {"blocks": blocks}

    @property
    def names(self) -> list[str]:
        """Command names in help order."""
        return list(self._pages)

    def aggregate(self) -> dict:
        return copy.deepcopy(self._aggregate)

    def page(self, name: str) -> dict:
        """Detail page for `name`, or the aggregate page if there is none."""
        if name not in self._pages:
            return self.aggregate()
        return {"blocks": copy.deepcopy(self._pages[name])}

    def __contains__(self, name: str) -> bool:
        return name in self._pages
