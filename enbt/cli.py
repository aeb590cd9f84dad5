"""Command line: turn a list of servers into a servers.dat file."""

from __future__ import annotations

import sys
from pathlib import Path

from enbt.nbt_writer import NBTWriter, TagId
from enbt.parse import FORMATS, parse_servers

PROGRAM = "enbt"
DEFAULT_OUTPUT = "servers.dat"
STDOUT_TARGET = "stdout"


def usage(program) -> None:
    """Print the usage text."""
    print(f"Usage: {program} -i <ip_list_input> [options]")
    print("Options")
    print("\t-i <input_file>\t\t\tInput file with list of ips")
    print("\t-t <csv|toml|json>\t\tSpecifies the type of input file")
    print("\t-o <output_path>\t\tSpecifies the output. Default is 'servers.dat'")
    print("\t--stdout\t\t\tOutputs the servers nbt to stdout. Equivalent to -o stdout")


def ips_to_dat(content, output_path, fmt) -> int:
    """Parse ``content`` as ``fmt`` and write the servers as NBT.

    ``output_path`` may be a directory, in which case ``servers.dat`` is
    written inside it, or ``stdout``.  Returns the number of bytes written;
    raises ValueError when there is nothing to write.
    """
    output_path = str(output_path)
    if not output_path:
        raise ValueError("Output path is empty")
    target = Path(output_path)
    if target.is_dir():
        target = target / DEFAULT_OUTPUT

    try:
        servers = parse_servers(content, fmt)
    except ValueError as err:
        print(err)
        servers = []
    if not servers:
        raise ValueError("There are no servers in your input file")

    to_stdout = str(target) == STDOUT_TARGET
    with NBTWriter(None if to_stdout else target, stdout_output=to_stdout) as writer:
        writer.write_list_head("servers", TagId.COMPOUND, len(servers))
        for server in servers:
            writer.write_compound("")
            writer.write_string("name", server.name)
            writer.write_string("icon", server.icon)
            writer.write_string("ip", server.ip)
            writer.write_byte("acceptTextures", int(server.accept_textures))
            writer.end_compound()
        writer.end_compound()
    return writer.byte_count()


def main(argv=None) -> int:
    """Run the command; returns the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)

    input_path = ""
    output_path = DEFAULT_OUTPUT
    input_type = "csv"
    output_to_stdout = False
    explicit_type = False

    remaining = iter(args)
    for cmd in remaining:
        if cmd in ("-?", "--help"):
            usage(PROGRAM)
            return 0
        if cmd == "--stdout":
            output_to_stdout = True
            continue
        if cmd not in ("-i", "-o", "-t"):
            print(f"unknown option '{cmd}'")
            usage(PROGRAM)
            return 1
        value = next(remaining, None)
        if value is None:
            print(f"'{cmd}' requires an argument")
            return 1
        # The first occurrence of an option wins.
        if cmd == "-i":
            if input_path == "":
                input_path = value
        elif cmd == "-o":
            if output_path == DEFAULT_OUTPUT:
                output_path = value
        else:
            if input_type == "csv":
                input_type = value
            explicit_type = True

    if output_to_stdout:
        output_path = STDOUT_TARGET

    stdin = sys.stdin
    stdin_piped = stdin is not None and not stdin.isatty()
    if not input_path:
        if not stdin_piped:
            print("No input data provided")
            return 1
        content = stdin.read()
    else:
        try:
            with open(input_path, encoding="utf-8", newline="") as handle:
                content = handle.read()
        except (OSError, UnicodeDecodeError):
            print(f"Unable to open input file for reading ({input_path})")
            return 1

    if not explicit_type:
        if stdin_piped:
            print(
                "You're piping data to enbt, but I have no idea what format it is. "
                "You need to provide the '-t' option"
            )
            return 1
        suffix = Path(input_path).suffix
        if not suffix:
            print(
                "The input file provided does not have an extension. "
                "Provide an explicit input type with the -t option"
            )
            return 1
        input_type = suffix[1:]

    if input_type not in FORMATS:
        print(f"Invalid value for -t '{input_type}'")
        return 1

    try:
        ips_to_dat(content, output_path, input_type)
    except (ValueError, OSError) as err:
        print(err)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())