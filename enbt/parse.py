"""Reading server lists from JSON, TOML and CSV text."""

from __future__ import annotations

import json
import re
import tomllib
from dataclasses import dataclass

FORMATS = ("csv", "toml", "json")

_MISSING_FIELDS = (
    "warning: a server entry is missing required fields. "
    "it will not be added to the servers list"
)
_CSV_DELIMITER = re.compile(r"[,|;]")
_JSON_FIELDS = ("icon", "ip", "name", "accept_textures")


@dataclass(frozen=True)
class Server:
    """One entry of the multiplayer server list."""

    icon: str  # base64
    ip: str
    name: str
    accept_textures: bool


def parse_servers_json(content: str) -> list[Server]:
    """Read servers from a JSON object holding a ``servers`` array.

    Entries lacking a field are skipped with a warning; a document that is
    empty or malformed raises ValueError.
    """
    if not content:
        raise ValueError("json file content is empty. no servers.dat created")
    try:
        config = json.loads(content)
    except (ValueError, RecursionError):
        raise ValueError(
            "json is malformed. validate the syntax and try again"
        ) from None
    if not isinstance(config, dict) or not isinstance(config.get("servers"), list):
        raise ValueError("json is malformed. requires a 'servers' array")

    servers = []
    for entry in config["servers"]:
        if not isinstance(entry, dict) or not all(key in entry for key in _JSON_FIELDS):
            print(_MISSING_FIELDS)
            continue
        icon, ip, name = entry["icon"], entry["ip"], entry["name"]
        accept = entry["accept_textures"]
        if not all(isinstance(text, str) for text in (icon, ip, name)) or not isinstance(
            accept, bool
        ):
            raise ValueError("json is malformed. a server entry has fields of the wrong type")
        servers.append(Server(icon=icon, ip=ip, name=name, accept_textures=accept))
    return servers


def _text_or_empty(table: dict, key: str) -> str:
    value = table.get(key, "")
    return value if isinstance(value, str) else ""


def parse_servers_toml(content: str) -> list[Server]:
    """Read servers from a TOML document with a ``[[servers]]`` array of tables.

    Entries with an empty or missing icon, ip or name are skipped with a
    warning; a missing ``accept_textures`` counts as false.
    """
    if not content:
        raise ValueError("toml file content is empty. no servers.dat created")
    try:
        config = tomllib.loads(content)
    except tomllib.TOMLDecodeError:
        raise ValueError(
            "toml file is malformed. validate the syntax and try again"
        ) from None
    tables = config.get("servers")
    if not isinstance(tables, list) or not all(isinstance(t, dict) for t in tables):
        raise ValueError(
            "toml is malformed. requires a 'servers' table as an array of tables"
        )

    servers = []
    for table in tables:
        icon = _text_or_empty(table, "icon")
        ip = _text_or_empty(table, "ip")
        name = _text_or_empty(table, "name")
        accept = table.get("accept_textures", False)
        if not isinstance(accept, bool):
            accept = False
        if not icon or not ip or not name:
            print(_MISSING_FIELDS)
            continue
        servers.append(Server(icon=icon, ip=ip, name=name, accept_textures=accept))
    return servers


def _split_csv_line(line: str) -> list[str]:
    """Split on ``,``, ``|`` or ``;``; a trailing delimiter adds no empty field."""
    if not line:
        return []
    items = _CSV_DELIMITER.split(line)
    if _CSV_DELIMITER.fullmatch(line[-1]):
        items.pop()
    return items


def parse_servers_csv(content: str) -> list[Server]:
    """Read servers from lines of ``name,icon,ip,accept_textures``.

    Fields may be separated by ``,``, ``|`` or ``;``.  A line with fewer than
    four fields is skipped with a warning; textures are accepted when the
    fourth field starts with ``1``.
    """
    if not content:
        raise ValueError("csv file content is empty. no servers.dat created")
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()

    servers = []
    for line in lines:
        items = _split_csv_line(line)
        if len(items) < 4:
            print(_MISSING_FIELDS)
            continue
        name, icon, ip, accept = items[:4]
        servers.append(
            Server(icon=icon, ip=ip, name=name, accept_textures=accept.startswith("1"))
        )
    return servers


_PARSERS = {
    "csv": parse_servers_csv,
    "toml": parse_servers_toml,
    "json": parse_servers_json,
}


def parse_servers(content: str, fmt: str) -> list[Server]:
    """Parse ``content`` in the named format: ``csv``, ``toml`` or ``json``."""
    try:
        parser = _PARSERS[fmt]
    except KeyError:
        raise ValueError(f"unknown input format '{fmt}'") from None
    return parser(content)