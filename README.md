# enbt

`enbt` turns a plain list of Minecraft servers into a `servers.dat` file. The
game reads its multiplayer server list from this NBT file. You keep the list in
CSV, TOML or JSON and build the binary file from it when you need it.

## Installation

```
pip install .
```

This installs the `enbt` command. To run the tests, install the `test` extra
(`pip install .[test]`) and run `pytest`.

## Command line

```
enbt -i <input_file> [options]
```

| Option                 | Meaning                                                           |
|------------------------|-------------------------------------------------------------------|
| `-i <input_file>`      | File that holds the list of servers                               |
| `-t <csv\|toml\|json>` | Format of the input. If you leave it out, the format comes from the file extension. |
| `-o <output_path>`     | Where to write. The default is `servers.dat`. If you give a directory, `servers.dat` is written inside it. |
| `--stdout`             | Write the NBT data to standard output. This is the same as `-o stdout` and takes precedence over `-o`. |
| `-?`, `--help`         | Show usage                                                        |

If you give an option more than once, the first value is used. The command
exits with status 0 on success. It exits with status 1 and prints a message in
these cases: an unknown option, an option with no value, an input file that
cannot be read, an unknown format, or an input that contains no usable servers.

With no `-i`, the server list is read from standard input. In that case `-t`
is required:

```
cat servers.toml | enbt -t toml -o ~/.minecraft
```

## Input formats

Every server entry has a name, an icon (base64 image data), an address and an
"accept textures" flag.

### CSV

Each line holds the fields name, icon, ip and accept-textures, in that order.
Fields may be separated by `,`, `|` or `;`. An accept-textures value that
begins with `1` means true. A line with fewer than four fields produces a
warning and is skipped.

```
My Server,iVBORw0KGgo...,play.example.com,1
```

### TOML

```toml
[[servers]]
name = "My Server"
icon = "iVBORw0KGgo..."
ip = "play.example.com"
accept_textures = true
```

An entry with a missing or empty `name`, `icon` or `ip` produces a warning and
is skipped. A missing `accept_textures` counts as false.

### JSON

```json
{
  "servers": [
    {
      "name": "My Server",
      "icon": "iVBORw0KGgo...",
      "ip": "play.example.com",
      "accept_textures": true
    }
  ]
}
```

An entry that lacks any of the four keys produces a warning and is skipped. If
a field has the wrong type (text fields that are not strings, or a flag that is
not a boolean), the whole document is rejected.

## Library use

`enbt.parse` provides `parse_servers_csv`, `parse_servers_toml`,
`parse_servers_json` and `parse_servers(content, fmt)`. The last one chooses the
parser from the format name: `"csv"`, `"toml"` or `"json"`. Each parser returns
a list of frozen `Server` records with the fields `icon`, `ip`, `name` and
`accept_textures`. A parser raises `ValueError` in these cases:

- the content is empty;
- the content is malformed;
- the content lacks the `servers` collection;
- `parse_servers` is given an unknown format name.

Skipped entries are reported with a warning printed to standard output.

`enbt.nbt_writer.NBTWriter` writes big-endian NBT one tag at a time. It accepts
three kinds of target: a path, a binary file object, or standard output
(`stdout_output=True`). It can also be created without a target and given one
later with `open()`. On opening, it writes the root compound header.

Inside a list, tag names are dropped. A list closes itself once it has received
the number of elements it declared. `close()`, which also runs when a `with`
block ends, does three things:

- fills any structure that is still open with placeholder values and appends a
  warning string;
- writes the root end tag;
- returns the number of bytes written.

```python
from enbt.parse import parse_servers_csv
from enbt.nbt_writer import NBTWriter, TagId

servers = parse_servers_csv("My Server,iVBORw0KGgo...,play.example.com,1\n")

with NBTWriter("servers.dat", False) as writer:
    writer.write_list_head("servers", TagId.COMPOUND, len(servers))
    for server in servers:
        writer.write_compound("")
        writer.write_string("name", server.name)
        writer.write_string("icon", server.icon)
        writer.write_string("ip", server.ip)
        writer.write_byte("acceptTextures", int(server.accept_textures))
        writer.end_compound()
    writer.end_compound()
```

`enbt.cli.ips_to_dat(content, output_path, fmt)` performs the same conversion
as the command on text you already hold, and returns the number of bytes
written.

## What it does not do

`enbt` only writes NBT. It cannot read an existing `servers.dat`, merge new
entries into it, or convert it back to CSV, TOML or JSON.