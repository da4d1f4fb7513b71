"""Tests for the dispatch table and formatters."""

import pytest

from slash.command import Command
from slash.formatter import Dasherized, Formatter
from slash.registry import SlashCommand, catch_all, compile_commands


def _command(name, *args):
    return Command(command=name, args=tuple(args), user_id="U1", channel_id="C1")


def _is_help(response):
    return isinstance(response, dict) and "supports the following commands" in str(response)


class TestDasherized:
    """Tests for the default formatter."""

    def test_lowercases_and_dasherizes(self):
        assert Dasherized().to_command_name("Greet_User") == "greet-user"

    def test_plain_name_unchanged(self):
        assert Dasherized().to_command_name("greet") == "greet"


class TestDispatch:
    """Tests for matching command names to handlers."""

    @pytest.mark.asyncio
    async def test_exact_match_routes_to_handler(self):
        table = compile_commands(
            [
                SlashCommand("greet", lambda cmd: f"Hello {cmd.args[0]}!"),
                SlashCommand("wave", lambda cmd: "*waves*"),
            ],
            Dasherized(),
            "Bot",
        )

        assert await table.match_command("greet", _command("greet", "alice")) == "Hello alice!"
        assert await table.match_command("wave", _command("wave")) == "*waves*"

    @pytest.mark.asyncio
    async def test_names_are_formatted(self):
        table = compile_commands([SlashCommand("greet_user", lambda cmd: "hi")], Dasherized(), "Bot")

        assert table.names == ["greet-user"]
        assert await table.match_command("greet-user", _command("greet-user")) == "hi"
        assert _is_help(await table.match_command("greet_user", _command("greet_user")))

    @pytest.mark.asyncio
    async def test_async_handler_is_awaited(self):
        async def greet(cmd):
            return "async hello"

        table = compile_commands([SlashCommand("greet", greet)], Dasherized(), "Bot")

        assert await table.match_command("greet", _command("greet")) == "async hello"

    @pytest.mark.asyncio
    async def test_unmatched_without_catch_all_gets_help(self):
        table = compile_commands([SlashCommand("greet", lambda cmd: "hi")], Dasherized(), "Bot")

        assert _is_help(await table.match_command("unknown", _command("unknown")))
        assert _is_help(await table.match_command("help", _command("help")))
        assert _is_help(await table.match_command("", _command("")))

    @pytest.mark.asyncio
    async def test_unmatched_with_catch_all_goes_to_catch_all(self):
        table = compile_commands(
            [
                SlashCommand("greet", lambda cmd: "hi"),
                catch_all(lambda cmd: f"Sorry, I don't understand {cmd.command}."),
            ],
            Dasherized(),
            "Bot",
        )

        response = await table.match_command("dance", _command("dance"))

        assert response == "Sorry, I don't understand dance."

    @pytest.mark.asyncio
    async def test_help_bypasses_catch_all(self):
        table = compile_commands([catch_all(lambda cmd: "fallback")], Dasherized(), "Bot")

        assert _is_help(await table.match_command("help", _command("help")))

    @pytest.mark.asyncio
    async def test_exact_match_beats_catch_all(self):
        table = compile_commands(
            [catch_all(lambda cmd: "fallback"), SlashCommand("greet", lambda cmd: "hi")],
            Dasherized(),
            "Bot",
        )

        assert await table.match_command("greet", _command("greet")) == "hi"

    @pytest.mark.asyncio
    async def test_registered_help_command_wins(self):
        table = compile_commands([SlashCommand("help", lambda cmd: "custom help")], Dasherized(), "Bot")

        assert await table.match_command("help", _command("help")) == "custom help"

    @pytest.mark.asyncio
    async def test_help_with_arguments_still_shows_listing(self):
        table = compile_commands(
            [
                SlashCommand("greet", lambda cmd: "hi", help="Sends you a hearty hello!"),
                SlashCommand("wave", lambda cmd: "*waves*"),
                catch_all(lambda cmd: "fallback"),
            ],
            Dasherized(),
            "Bot",
        )

        response = await table.match_command("help", _command("help", "greet"))

        assert response == table.help_pages.aggregate()


class TestCompileCommands:
    """Tests for construction-time checks."""

    def test_duplicate_formatted_names_fail(self):
        from slash.errors import ConfigurationError

        with pytest.raises(ConfigurationError, match="greet-user"):
            compile_commands(
                [SlashCommand("greet_user", lambda cmd: "a"), SlashCommand("Greet-User", lambda cmd: "b")],
                Dasherized(),
                "Bot",
            )

    def test_two_catch_alls_fail(self):
        from slash.errors import ConfigurationError

        with pytest.raises(ConfigurationError, match="catch-all"):
            compile_commands([catch_all(lambda cmd: "a"), catch_all(lambda cmd: "b")], Dasherized(), "Bot")

    def test_non_callable_handler_fails(self):
        from slash.errors import ConfigurationError

        with pytest.raises(ConfigurationError):
            compile_commands([SlashCommand("greet", "not a function")], Dasherized(), "Bot")

    @pytest.mark.asyncio
    async def test_custom_formatter(self):
        class Underscored(Formatter):
            def to_command_name(self, name):
                return name.upper()

        table = compile_commands([SlashCommand("greet", lambda cmd: "hi")], Underscored(), "Bot")

        assert table.names == ["GREET"]
        assert await table.match_command("GREET", _command("GREET")) == "hi"
