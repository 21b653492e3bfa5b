"""Run code snippets through the online compiler service and format the replies."""

from __future__ import annotations

import json
import os
import re
from typing import Any, Mapping

import requests

API_URL = "https://tool.runoob.com/compile2.php"
REQUEST_TIMEOUT = 15.0
TRUNCATION_MARK = "\n............\n............"
MAX_LINES = 30
MAX_CHARS = 1000

_FORM_TOKEN = os.environ.get("KUMABOT_RUNCODE_TOKEN", "token")

HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "Referer": "https://c.runoob.com/",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:87.0) "
        "Gecko/20100101 Firefox/87.0"
    ),
}

HELP = (
    "在线代码运行: \n"
    ">runcode [language] [code block]\n"
    "模板查看: \n"
    ">runcode [language] help\n"
    "支持语种: \n"
    "Go || Python || C/C++ || C# || Java || Lua \n"
    "JavaScript || TypeScript || PHP || Shell \n"
    "Kotlin  || Rust || Erlang || Ruby || Swift \n"
    "R || VB || Py2 || Perl || Pascal || Scala"
)

_JS = 'console.log("Hello World!");'
_CPP = (
    "#include <iostream>\nusing namespace std;\n\nint main()\n{\n"
    '   cout << "Hello World";\n   return 0;\n}'
)
_CS = (
    "using System;\nnamespace HelloWorldApplication\n{\n   class HelloWorld\n   {\n"
    "      static void Main(string[] args)\n      {\n"
    '         Console.WriteLine("Hello World!");\n      }\n   }\n}'
)
_RUST = 'fn main() {\n    println!("Hello World!");\n}'
_SHELL = "echo 'Hello World!'"
_PY3 = 'print("Hello, World!")'
_KOTLIN = 'fun main(args : Array<String>){\n    println("Hello World!")\n}'
_TS = 'const hello : string = "Hello World!"\nconsole.log(hello)'
_RUBY = 'puts "Hello World!";'
_SWIFT = 'var myString = "Hello, World!"\nprint(myString)'

TEMPLATES: dict[str, str] = {
    "py2": "print 'Hello World!'",
    "ruby": _RUBY,
    "rb": _RUBY,
    "php": "<?php\n\techo 'Hello World!';\n?>",
    "javascript": _JS,
    "js": _JS,
    "node.js": _JS,
    "scala": (
        "object Main {\n  def main(args:Array[String])\n  {\n"
        '    println("Hello World!")\n  }\n\t\t\n}'
    ),
    "go": 'package main\n\nimport "fmt"\n\nfunc main() {\n   fmt.Println("Hello, World!")\n}',
    "c": '#include <stdio.h>\n\nint main()\n{\n   printf("Hello, World! \n");\n   return 0;\n}',
    "c++": _CPP,
    "cpp": _CPP,
    "java": (
        "public class HelloWorld {\n    public static void main(String []args) {\n"
        '       System.out.println("Hello World!");\n    }\n}'
    ),
    "rust": _RUST,
    "rs": _RUST,
    "c#": _CS,
    "cs": _CS,
    "csharp": _CS,
    "shell": _SHELL,
    "bash": _SHELL,
    "erlang": (
        "% escript will ignore the first line\n\nmain(_) ->\n"
        '    io:format("Hello World!~n").'
    ),
    "perl": 'print "Hello, World!\n";',
    "python": _PY3,
    "py": _PY3,
    "swift": _SWIFT,
    "lua": _SWIFT,
    "pascal": "runcode Hello;\nbegin\n  writeln ('Hello, world!')\nend.",
    "kotlin": _KOTLIN,
    "kt": _KOTLIN,
    "r": 'myString <- "Hello, World!"\nprint ( myString)',
    "vb": (
        "Module Module1\n\n    Sub Main()\n"
        '        Console.WriteLine("Hello World!")\n    End Sub\n\nEnd Module'
    ),
    "typescript": _TS,
    "ts": _TS,
}

TABLE: dict[str, tuple[str, str]] = {
    "py2": ("0", "py"),
    "ruby": ("1", "rb"),
    "rb": ("1", "rb"),
    "php": ("3", "php"),
    "javascript": ("4", "js"),
    "js": ("4", "js"),
    "node.js": ("4", "js"),
    "scala": ("5", "scala"),
    "go": ("6", "go"),
    "c": ("7", "c"),
    "c++": ("7", "cpp"),
    "cpp": ("7", "cpp"),
    "java": ("8", "java"),
    "rust": ("9", "rs"),
    "rs": ("9", "rs"),
    "c#": ("10", "cs"),
    "cs": ("10", "cs"),
    "csharp": ("10", "cs"),
    "shell": ("10", "sh"),
    "bash": ("10", "sh"),
    "erlang": ("12", "erl"),
    "perl": ("14", "pl"),
    "python": ("15", "py3"),
    "py": ("15", "py3"),
    "swift": ("16", "swift"),
    "lua": ("17", "lua"),
    "pascal": ("18", "pas"),
    "kotlin": ("19", "kt"),
    "kt": ("19", "kt"),
    "r": ("80", "r"),
    "vb": ("84", "vb"),
    "typescript": ("1010", "ts"),
    "ts": ("1010", "ts"),
}

UNSUPPORTED_TEXT = "语言不是受支持的编程语种呢~"

_COMMAND = re.compile(r"^>runcode(raw)?\s(.+?)\s([\s\S]+)\Z")


class RunCodeError(Exception):
    """Raised when a language is unknown or a run fails."""


def clear_newline_suffix(text: str) -> str:
    """Strip every trailing line feed."""
    return text.rstrip("\n")


def cut_too_long(text: str) -> str:
    """Truncate output that has too many lines or characters."""
    count = 0
    for i, ch in enumerate(text):
        if ch == "\r" and text[i + 1 : i + 2] == "\n":
            pass  # the following "\n" is counted on its own
        elif ch in "\r\n":
            count += 1
        if count > MAX_LINES or i > MAX_CHARS:
            return text[: i - 1] + TRUNCATION_MARK
    return text


def lookup_language(language: str) -> tuple[str, str]:
    """Return the (language id, file extension) pair for a language name."""
    try:
        return TABLE[language.lower()]
    except KeyError:
        raise RunCodeError(f"unsupported language: {language}") from None


def build_form(code: str, run_type: tuple[str, str]) -> dict[str, str]:
    """Build the form fields posted to the compiler service."""
    language_id, file_ext = run_type
    return {
        "code": code,
        "token": _FORM_TOKEN,
        "stdin": "",
        "language": language_id,
        "fileext": file_ext,
    }


def _string_field(content: Any, key: str) -> str:
    if isinstance(content, Mapping):
        value = content.get(key)
        if isinstance(value, str):
            return value
    return ""


def parse_result(payload: bytes | str) -> str:
    """Extract the program output from a service response, raising on errors."""
    try:
        content = json.loads(payload)
    except (ValueError, TypeError):
        content = None
    errors = _string_field(content, "errors")
    if errors != "\n\n":
        raise RunCodeError(cut_too_long(clear_newline_suffix(errors)))
    return cut_too_long(clear_newline_suffix(_string_field(content, "output")))


def run_code(code: str, run_type: tuple[str, str], session: Any = None) -> str:
    """Send code to the compiler service and return its output."""
    client = session if session is not None else requests.Session()
    try:
        response = client.post(
            API_URL,
            data=build_form(code, run_type),
            headers=dict(HEADERS),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise RunCodeError(str(exc)) from exc
    if response.status_code != 200:
        raise RunCodeError("code not 200")
    return parse_result(response.content)


def _unescape_cq(text: str) -> str:
    return (
        text.replace("&#44;", ",")
        .replace("&#91;", "[")
        .replace("&#93;", "]")
        .replace("&amp;", "&")
    )


def handle_runcode(message: str, nickname: str, session: Any = None) -> str | None:
    """Answer a ``>runcode`` command; return None when the message is not one."""
    matched = _COMMAND.match(message)
    if matched is None:
        return None
    is_raw = matched.group(1) is not None
    language = matched.group(2).lower()
    header = f"> {nickname}\n"
    try:
        run_type = lookup_language(language)
    except RunCodeError:
        return header + UNSUPPORTED_TEXT
    block = _unescape_cq(matched.group(3))
    if block == "help":
        return (
            f"> {nickname}  {language}-template:\n"
            f">runcode {language}\n{TEMPLATES[language]}"
        )
    try:
        output = run_code(block, run_type, session)
    except RunCodeError as exc:
        return f"{header}ERROR: {exc}"
    return output if is_raw else header + output