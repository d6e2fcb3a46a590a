"""Static package metadata surfaced by the CLI banner."""

from __future__ import annotations

from typing import Callable

name = "lib_log_supabase"
title = "Opt-in log forwarding from Python logging to Supabase tables"
version = "0.1.0"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_supabase"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Write the metadata banner, one ``key = value`` line per field.

    Examples
    --------
    >>> print_info()  # doctest: +ELLIPSIS
    Info for lib_log_supabase:
    ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    text = "\n".join(lines) + "\n"
    if writer is None:
        print(text, end="")
    else:
        writer(text)
