import logging
from pathlib import Path
from typing import Annotated

from simple_stream.enums import VarintLengthType
from simple_stream.reader import SimpleReader

try:
    import click
    import typer
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.markup import escape
except ImportError as e:
    raise ImportError(
        "Please install the extra dependencies for the CLI: pip install simple-stream[cli]"
    ) from e

app = typer.Typer()
console = Console()
error_console = Console(stderr=True)

logger = logging.getLogger(__name__)


SourcePathType = Annotated[
    Path,
    typer.Argument(help="File to read from."),
]

BigEndianType = Annotated[
    bool,
    typer.Option(
        envvar="BIG_ENDIAN",
        help="Read multi-byte values in big endian order.",
    ),
]

VarintType = Annotated[
    str,
    typer.Option(
        envvar="VARINT_TYPE",
        help="Width of varints in the stream.",
        click_type=click.Choice(
            [varint.name for varint in VarintLengthType],
            case_sensitive=False,
        ),
    ),
]

OffsetType = Annotated[
    int,
    typer.Option(
        help="Offset to start from.",
        click_type=click.IntRange(0),
    ),
]

LengthType = Annotated[
    int | None,
    typer.Option(
        help="Number of bytes to show, defaults to the rest of the stream.",
        click_type=click.IntRange(0),
    ),
]

OverwriteType = Annotated[
    bool,
    typer.Option(
        envvar="OVERWRITE",
        help="Replace the target file if it already exists.",
    ),
]


def _fail(exc: Exception) -> typer.Exit:
    logger.debug("Command failed", exc_info=exc)
    error_console.print(f"[bold red]{escape(str(exc))}[/bold red]")
    return typer.Exit(code=1)


def hexdump(data: bytes, offset: int = 0, width: int = 16) -> list[str]:
    lines = []
    for start in range(0, len(data), width):
        chunk = data[start : start + width]
        text = "".join(chr(byte) if 0x20 <= byte < 0x7F else "." for byte in chunk)
        lines.append(f"{offset + start:08x}  {chunk.hex(' '):<{width * 3 - 1}}  {text}")
    return lines


@app.command()
def info(
    path: SourcePathType,
    big_endian: BigEndianType = False,
    varint_type: VarintType = "INT32",
):
    try:
        reader = SimpleReader.from_path(path, big_endian)
    except FileNotFoundError as e:
        raise _fail(e) from e

    with reader:
        reader.varint_type = VarintLengthType[varint_type.upper()]
        logger.info("Inspecting %s", path)
        console.print(f"length: {reader.length}")
        console.print(f"position: {reader.position}")
        console.print(f"remaining: {reader.remaining}")
        console.print(f"byteorder: {reader.byteorder}")
        console.print(f"varint length: {reader.varint_length}")


@app.command()
def dump(
    path: SourcePathType,
    offset: OffsetType = 0,
    length: LengthType = None,
):
    try:
        reader = SimpleReader.from_path(path)
    except FileNotFoundError as e:
        raise _fail(e) from e

    with reader:
        try:
            reader.set_position(offset)
            data = reader.read_all() if length is None else reader.read(length)
        except ValueError as e:
            raise _fail(e) from e
        logger.info("Dumping %d bytes from offset %d", len(data), offset)
        for line in hexdump(data, offset):
            console.print(line, highlight=False, markup=False)


@app.command()
def copy(
    source: SourcePathType,
    target: Annotated[Path, typer.Argument(help="File to write to.")],
    overwrite: OverwriteType = False,
):
    try:
        reader = SimpleReader.from_path(source)
    except FileNotFoundError as e:
        raise _fail(e) from e

    with reader:
        try:
            reader.finish_write(target, overwrite)
        except FileExistsError as e:
            raise _fail(e) from e
    logger.info("Copied %s to %s", source, target)


LogLevelType = Annotated[
    str,
    typer.Option(
        envvar="LOG_LEVEL",
        click_type=click.Choice(
            [*logging.getLevelNamesMapping().keys()],
            case_sensitive=False,
        ),
        help="Logging level.",
    ),
]


@app.callback()
def main(log_level: LogLevelType = "WARNING"):
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


if __name__ == "__main__":
    app()
