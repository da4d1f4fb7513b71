"""Slack slash command router."""

from .command import Command, put_data
from .errors import ConfigurationError, GuardReturnError, MalformedRequest, SlashError
from .formatter import Dasherized, Formatter
from .guards import Err, Guard, Ok
from .registry import SlashCommand, catch_all
from .response import AsyncAck, defer
from .router import Router, SlashResponse, Stage

__all__ = [
    "AsyncAck",
    "Command",
    "ConfigurationError",
    "Dasherized",
    "Err",
    "Formatter",
    "Guard",
    "GuardReturnError",
    "MalformedRequest",
    "Ok",
    "Router",
    "SlashCommand",
    "SlashError",
    "SlashResponse",
    "Stage",
    "catch_all",
    "defer",
    "put_data",
]
