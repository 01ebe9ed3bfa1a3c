"""Code-block language numbering.

Feishu stores a code block's language as an integer (``style.language``).
:data:`FEISHU_LANGUAGES` is the single table used in both directions: fence
info strings are mapped to numbers on write, numbers back to names on read.
"""

from __future__ import annotations

import re

PLAIN_TEXT = 1

FEISHU_LANGUAGES: dict[int, str] = {
    1: "PlainText", 2: "ABAP", 3: "Ada", 4: "Apache", 5: "Apex",
    6: "Assembly", 7: "Bash", 8: "CSharp", 9: "C++", 10: "C",
    11: "COBOL", 12: "CSS", 13: "CoffeeScript", 14: "D", 15: "Dart",
    16: "Delphi", 17: "Django", 18: "Dockerfile", 19: "Erlang", 20: "Fortran",
    21: "FoxPro", 22: "Go", 23: "Groovy", 24: "HTML", 25: "HTMLBars",
    26: "HTTP", 27: "Haskell", 28: "JSON", 29: "Java", 30: "JavaScript",
    31: "Julia", 32: "Kotlin", 33: "LateX", 34: "Lisp", 35: "Logo",
    36: "Lua", 37: "MATLAB", 38: "Makefile", 39: "Markdown", 40: "Nginx",
    41: "Objective-C", 42: "OpenEdgeABL", 43: "PHP", 44: "Perl", 45: "PostScript",
    46: "PowerShell", 47: "Prolog", 48: "ProtoBuf", 49: "Python", 50: "R",
    51: "RPG", 52: "Ruby", 53: "Rust", 54: "SAS", 55: "SCSS",
    56: "SQL", 57: "Scala", 58: "Scheme", 59: "Scratch", 60: "Shell",
    61: "Swift", 62: "Thrift", 63: "TypeScript", 64: "VBScript", 65: "Visual Basic",
    66: "XML", 67: "YAML", 68: "CMake", 69: "Diff", 70: "Gherkin",
    71: "GraphQL", 72: "GLSL", 73: "Properties", 74: "Solidity", 75: "TOML",
}

_CODES_BY_NAME: dict[str, int] = {
    name.lower(): code for code, name in FEISHU_LANGUAGES.items()
}

_LANGUAGE_ALIASES: dict[str, str] = {
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "sh": "shell",
    "zsh": "shell",
    "rb": "ruby",
    "rs": "rust",
    "yml": "yaml",
    "md": "markdown",
    "cs": "csharp",
    "c#": "csharp",
    "cpp": "c++",
    "objc": "objective-c",
    "kt": "kotlin",
    "golang": "go",
    "docker": "dockerfile",
    "ps1": "powershell",
    "proto": "protobuf",
    "tex": "latex",
    "text": "plaintext",
    "txt": "plaintext",
    "plain": "plaintext",
    "mermaid": "plaintext",
}

# Checked in order; the first rule with a hit decides.
_SQL_MARKERS = ("CREATE TABLE", "ALTER TABLE", "INSERT INTO", "SELECT ", "DROP TABLE")
_JAVA_MARKERS = (
    "@FeignClient", "public ", "private ", "interface ", "class ",
    "@Override", "@GetMapping", "@PostMapping", "import ",
)
_DIAGRAM_MARKERS = ("flowchart", "sequenceDiagram", "stateDiagram", "erDiagram", "gantt")
_HTTP_MARKERS = ("GET /", "POST /", "PUT /", "DELETE /")


def language_code(tag: str | None) -> int:
    """Map a fence info string to a Feishu language number.

    Matching is case-insensitive, uses the first word only, accepts common
    aliases, and tolerates a trailing version number (``python3``).
    Unknown or empty tags map to PlainText.
    """
    if not tag or not tag.strip():
        return PLAIN_TEXT
    lang = tag.strip().lower().split()[0]
    for candidate in (lang, re.sub(r"\d+$", "", lang)):
        candidate = _LANGUAGE_ALIASES.get(candidate, candidate)
        if candidate in _CODES_BY_NAME:
            return _CODES_BY_NAME[candidate]
    return PLAIN_TEXT


def language_name(code: object) -> str:
    """Map a Feishu language number to a fence info string.

    PlainText and unknown numbers give ``""``.
    """
    if not isinstance(code, int) or code == PLAIN_TEXT:
        return ""
    return FEISHU_LANGUAGES.get(code, "")


def guess_language(code: str) -> str:
    """Best-effort language tag for an untagged fence; ``""`` if unsure."""
    body = code.strip()
    if any(k in body for k in _SQL_MARKERS):
        return "sql"
    if any(k in body for k in _JAVA_MARKERS):
        return "java"
    if body.startswith(("{", "[")):
        return "json"
    if any(k in body for k in _DIAGRAM_MARKERS):
        return "mermaid"
    if any(k in body for k in _HTTP_MARKERS):
        return "bash"
    return ""
