"""Text command interface over a SettingsStore."""
import json
import sys
from dataclasses import dataclass
from typing import Callable

import settings
from settings_store import SettingsError, SettingsStore

REGISTRY: dict[str, "CommandInfo"] = {}


@dataclass
class CommandInfo:
    name: str
    handler: Callable[[SettingsStore, str], str]
    help: str
    usage: str | None = None


def command(name: str, help: str, usage: str | None = None):
    """Decorator to register a settings command."""
    def decorator(fn: Callable[[SettingsStore, str], str]):
        REGISTRY[name] = CommandInfo(name, fn, help, usage)
        return fn
    return decorator


def dispatch(store: SettingsStore, raw_input: str) -> str:
    """Parse and execute a command against `store`. Returns its output."""
    content = raw_input.strip()
    if not content:
        return "Type help for available commands."

    parts = content.split(maxsplit=1)
    cmd_name = parts[0].lower()
    args = parts[1] if len(parts) > 1 else ""

    if cmd_name not in REGISTRY:
        return f"Unknown command: {cmd_name}. Type help for available commands."

    try:
        return REGISTRY[cmd_name].handler(store, args)
    except SettingsError as e:
        return f"Error: {e}"


def parse_value(text: str):
    """Parse a command-line value as JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _usage(name: str) -> str:
    return f"Usage: {REGISTRY[name].usage}"


# ─────────────────────────────────────────────────────────────
# Built-in Commands
# ─────────────────────────────────────────────────────────────

@command("help", help="List available commands")
def cmd_help(store: SettingsStore, args: str) -> str:
    lines = [f"Settings file: {store.path}", "", "Available commands:"]
    for name, info in sorted(REGISTRY.items()):
        usage = info.usage or name
        lines.append(f"  {usage:<22} {info.help}")
    return "\n".join(lines)


@command("get", help="Print the value stored under KEY", usage="get KEY")
def cmd_get(store: SettingsStore, args: str) -> str:
    key = args.strip()
    if not key:
        return _usage("get")
    return json.dumps(store.get(key), indent=2, ensure_ascii=False)


@command("set", help="Store VALUE (JSON or plain text) under KEY", usage="set KEY VALUE")
def cmd_set(store: SettingsStore, args: str) -> str:
    parts = args.strip().split(maxsplit=1)
    if len(parts) < 2:
        return _usage("set")

    key, raw_value = parts
    store.set(key, parse_value(raw_value))
    return f"Set {key}"


@command("has", help="Check whether KEY exists", usage="has KEY")
def cmd_has(store: SettingsStore, args: str) -> str:
    key = args.strip()
    if not key:
        return _usage("has")
    return "true" if store.has_value(key) else "false"


@command("clear", help="Remove KEY", usage="clear KEY")
def cmd_clear(store: SettingsStore, args: str) -> str:
    key = args.strip()
    if not key:
        return _usage("clear")
    store.clear(key)
    return f"Cleared {key}"


@command("list", help="List all settings")
def cmd_list(store: SettingsStore, args: str) -> str:
    entries = store.list_values()
    if not entries:
        return "(no settings)"
    return "\n".join(
        f"{key} = {json.dumps(value, ensure_ascii=False)}"
        for key, value in sorted(entries)
    )


def main(argv: list[str] | None = None) -> int:
    """Console entry point: run one command against the default settings file."""
    settings.setup_logging()
    argv = sys.argv[1:] if argv is None else argv

    try:
        store = SettingsStore.open()
    except SettingsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with store:
        output = dispatch(store, " ".join(argv) or "help")

    if output.startswith("Error:"):
        print(output, file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
