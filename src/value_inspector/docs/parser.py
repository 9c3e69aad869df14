"""CommentParser: turns a structured documentation comment into a DocComment.

Understands three flavours of tagged documentation:
- ``@tag`` blocks (e.g. ``@param int $a First``), optionally wrapped in
  ``/** ... */`` delimiters with ``*`` continuation markers
- reST field lists (e.g. ``:param int a: First``, ``:rtype: int``)
- Google-style sections (``Args:``, ``Returns:``, ``Raises:``, ``Yields:``)

All three produce the same tag entry shapes.  Parsing never raises: a tag
body that does not fit its expected shape degrades to a GenericTag.
"""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass, field, replace

# Compiled regex patterns (module-level, compiled once)

# Opening "/*" (or "/**") and closing "*/" delimiters of a block comment
_OPEN = re.compile(r"^\s*/\*+[ \t]*")
_CLOSE = re.compile(r"\s*\*+/\s*$")

# Leading "*" continuation marker on each line of a block comment
_CONTINUATION = re.compile(r"^[ \t]*\*(?!/)", re.MULTILINE)

# First line that starts a tag, e.g. "  @param ..."
_FIRST_TAG = re.compile(r"^[ \t]*@\S", re.MULTILINE)

# One "@name body" tag; the body runs until the next tag line or end of text
_TAG = re.compile(
    r"^[ \t]*@(?P<name>\S+)[ \t]*(?P<body>.*?)\s*(?=\n[ \t]*@\S|\Z)",
    re.DOTALL | re.MULTILINE,
)

# Title ends at the first sentence terminator or blank line
_TITLE = re.compile(r"(.*?)(\.\s|\n[ \t]*\n|\Z)", re.DOTALL)

# Any whitespace run containing a newline
_NEWLINE_RUN = re.compile(r"\s*\n\s*")

# "@param <type> $<name> <description>"
_PARAM_SIGIL = re.compile(r"^(\S*)\s*\$(\S+)\s*(.*)$", re.DOTALL)

# "<type> <description>" for return/var/throws
_TYPED = re.compile(r"^(\S+)\s*(.*)$", re.DOTALL)

# reST field list entry, e.g. ":param int a: First" or ":rtype: int"
_FIELD = re.compile(r"^:(?P<name>\w+)(?:\s+(?P<args>[^:]+?))?\s*:(?:\s+(?P<body>.*)|$)")

# Google-style section header, e.g. "Args:"
_SECTION = re.compile(
    r"^(?P<name>Args|Arguments|Parameters|Params|Keyword Args|Keyword Arguments"
    r"|Returns|Return|Yields|Yield|Raises|Throws):\s*$"
)

# Google-style argument entry, e.g. "name (int, optional): description"
_GOOGLE_ARG = re.compile(r"^(?P<name>\*{0,2}\w+)\s*(?:\((?P<type>[^)]*)\))?\s*:\s*(?P<desc>.*)$")

# Google-style typed return/raise entry, e.g. "int: description"
_GOOGLE_TYPED = re.compile(r"^(?P<type>[A-Za-z_][\w.\[\], |]*?)\s*:\s*(?P<desc>.*)$")

_SECTION_TAGS = {
    "Args": "param",
    "Arguments": "param",
    "Parameters": "param",
    "Params": "param",
    "Keyword Args": "param",
    "Keyword Arguments": "param",
    "Returns": "return",
    "Return": "return",
    "Yields": "yields",
    "Yield": "yields",
    "Raises": "throws",
    "Throws": "throws",
}

_FIELD_PARAMS = frozenset({"param", "parameter", "arg", "argument", "key", "keyword"})
_FIELD_RAISES = frozenset({"raises", "raise", "except", "exception", "throws"})
_TAG_ALIASES = {"raises": "throws", "raise": "throws", "returns": "return"}


@dataclass(frozen=True, slots=True)
class TypeHint:
    """One alternative of a ``|``-separated type expression."""

    type_name: str
    is_array_of: bool = False


@dataclass(frozen=True, slots=True)
class ParamTag:
    type_hints: tuple[TypeHint, ...]
    name: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class ValueTag:
    """Shape of ``return``, ``var`` and ``yields`` tags."""

    type_hints: tuple[TypeHint, ...]
    description: str = ""


@dataclass(frozen=True, slots=True)
class ThrowsTag:
    type_name: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class GenericTag:
    description: str = ""


TagEntry = ParamTag | ValueTag | ThrowsTag | GenericTag


@dataclass(frozen=True, slots=True)
class DocComment:
    """Parsed documentation: title, long description and tags.

    Attributes:
        title:       Summary up to the first sentence terminator or blank line.
        description: Everything after the title, whitespace-normalized.
        tags:        Tag name -> entries in source order.  Tag names appear in
                     order of first occurrence.  Treat as read-only: parsed
                     comments are shared through DocCommentCache.
    """

    title: str = ""
    description: str = ""
    tags: dict[str, list[TagEntry]] = field(default_factory=dict)

    @property
    def summary(self) -> str:
        """Title and description joined by a blank line, for tooltips."""
        if self.title and self.description:
            return f"{self.title}\n\n{self.description}"
        return self.title or self.description

    def param(self, name: str) -> ParamTag | None:
        """Return the first ``param`` tag documenting ``name``, if any."""
        for entry in self.tags.get("param", []):
            if isinstance(entry, ParamTag) and entry.name == name:
                return entry
        return None


def normalize_string(text: str) -> str:
    """Collapse every whitespace run that contains a newline into one space."""
    return _NEWLINE_RUN.sub(" ", text.strip())


def parse_type_hints(expression: str) -> tuple[TypeHint, ...]:
    """Split a ``|``-separated type expression into TypeHints.

    An alternative ending in ``[]`` is an "array of" its base type::

        parse_type_hints("int|string[]")
        # (TypeHint("int"), TypeHint("string", is_array_of=True))
    """
    hints: list[TypeHint] = []
    for alternative in expression.split("|"):
        alternative = alternative.strip()
        if not alternative:
            continue
        if alternative.endswith("[]"):
            hints.append(TypeHint(alternative[:-2], is_array_of=True))
        else:
            hints.append(TypeHint(alternative))
    return tuple(hints)


class CommentParser:
    """Parses documentation comments and docstrings into DocComment objects.

    Processing pipeline (applied in order):
    1. Normalize line endings, strip ``/** */`` delimiters and ``*`` markers,
       dedent.
    2. Split at the first line starting with ``@``: everything before is the
       description region, everything after is the tag region.
    3. Lift reST fields and Google-style sections out of the description
       region into tags.
    4. Split the remaining prose into title and long description.
    5. Parse each ``@tag`` of the tag region according to its name.

    Example usage:
        parser = CommentParser()
        doc = parser.parse("/** Adds two numbers.\\n * @return int Sum\\n */")
        doc.title                       # "Adds two numbers."
        doc.tags["return"][0].description  # "Sum"
    """

    def parse(self, raw: str | None) -> DocComment:
        """Parse ``raw`` into a DocComment; empty or None yields an empty one."""
        if not raw or not raw.strip():
            return DocComment()

        text = self._clean(raw)
        tags: dict[str, list[TagEntry]] = {}

        first_tag = _FIRST_TAG.search(text)
        prose = text if first_tag is None else text[: first_tag.start()]
        tag_region = "" if first_tag is None else text[first_tag.start() :]

        prose = self._lift_sections(prose, tags)
        title, description = self._split_title(prose)

        for match in _TAG.finditer(tag_region):
            name = match.group("name")
            name = _TAG_ALIASES.get(name, name)
            tags.setdefault(name, []).append(self._parse_tag(name, match.group("body")))

        return DocComment(title=title, description=description, tags=tags)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    @staticmethod
    def _clean(raw: str) -> str:
        text = raw.replace("\r\n", "\n").replace("\r", "\n").strip()
        if text.startswith("/*"):
            text = _OPEN.sub("", text)
            text = _CLOSE.sub("", text)
            text = _CONTINUATION.sub("", text)
        return inspect.cleandoc(text)

    @staticmethod
    def _split_title(prose: str) -> tuple[str, str]:
        prose = prose.strip()
        match = _TITLE.match(prose)
        if match is None or not prose:
            return "", ""
        title = normalize_string(match.group(0))
        description = normalize_string(prose[match.end() :])
        return title, description

    def _parse_tag(self, name: str, body: str) -> TagEntry:
        body = body.strip()
        if name == "param":
            return self._parse_param(body)
        if name in ("return", "var", "yields"):
            match = _TYPED.match(body)
            if match is None:
                return GenericTag(normalize_string(body))
            return ValueTag(parse_type_hints(match.group(1)), normalize_string(match.group(2)))
        if name == "throws":
            match = _TYPED.match(body)
            if match is None:
                return GenericTag(normalize_string(body))
            return ThrowsTag(match.group(1), normalize_string(match.group(2)))
        return GenericTag(normalize_string(body))

    @staticmethod
    def _parse_param(body: str) -> TagEntry:
        if not body:
            return GenericTag("")
        match = _PARAM_SIGIL.match(body)
        if match is not None:
            return ParamTag(
                parse_type_hints(match.group(1)),
                match.group(2).rstrip(":"),
                normalize_string(match.group(3)),
            )
        tokens = body.split(maxsplit=2)
        # "@param name: description"
        if tokens[0].endswith(":"):
            rest = body[len(tokens[0]) :]
            return ParamTag((), tokens[0][:-1], normalize_string(rest))
        if len(tokens) == 1:
            return ParamTag(parse_type_hints(tokens[0]), "", "")
        description = tokens[2] if len(tokens) == 3 else ""
        return ParamTag(
            parse_type_hints(tokens[0]), tokens[1].rstrip(":"), normalize_string(description)
        )

    # ------------------------------------------------------------------
    # reST fields and Google-style sections
    # ------------------------------------------------------------------

    def _lift_sections(self, prose: str, tags: dict[str, list[TagEntry]]) -> str:
        """Move field lists and sections from ``prose`` into ``tags``.

        Returns the prose with those regions removed.
        """
        lines = prose.split("\n")
        kept: list[str] = []
        param_types: dict[str, str] = {}
        return_type: str | None = None
        i = 0

        while i < len(lines):
            line = lines[i]
            section = _SECTION.match(line)
            field_match = _FIELD.match(line)

            if section is not None:
                block, i = self._indented_block(lines, i + 1)
                tag_name = _SECTION_TAGS[section.group("name")]
                for entry in self._section_entries(block):
                    tags.setdefault(tag_name, []).append(self._section_tag(tag_name, entry))
                continue

            if field_match is not None:
                block, i = self._indented_block(lines, i + 1)
                name = field_match.group("name")
                args = (field_match.group("args") or "").split()
                body = normalize_string(" ".join([field_match.group("body") or "", *block]))
                if name in _FIELD_PARAMS and args:
                    hints = parse_type_hints(" ".join(args[:-1]))
                    tags.setdefault("param", []).append(ParamTag(hints, args[-1], body))
                elif name == "type" and args:
                    param_types[args[-1]] = body
                elif name in ("return", "returns"):
                    tags.setdefault("return", []).append(ValueTag((), body))
                elif name == "rtype":
                    return_type = body
                elif name in _FIELD_RAISES:
                    type_name = args[0] if args else ""
                    tags.setdefault("throws", []).append(ThrowsTag(type_name, body))
                else:
                    tags.setdefault(name, []).append(GenericTag(body))
                continue

            kept.append(line)
            i += 1

        self._apply_types(tags, param_types, return_type)
        return "\n".join(kept)

    @staticmethod
    def _indented_block(lines: list[str], start: int) -> tuple[list[str], int]:
        """Collect indented (or blank) lines from ``start``; return them and the next index."""
        block: list[str] = []
        i = start
        while i < len(lines) and (not lines[i].strip() or lines[i][:1] in (" ", "\t")):
            block.append(lines[i])
            i += 1
        # Trailing blank lines belong to the surrounding prose
        while block and not block[-1].strip():
            block.pop()
            i -= 1
        return block, i

    @staticmethod
    def _section_entries(block: list[str]) -> list[str]:
        """Group a section body into entries; deeper-indented lines continue an entry."""
        indents = [len(line) - len(line.lstrip()) for line in block if line.strip()]
        if not indents:
            return []
        base = min(indents)
        entries: list[list[str]] = []
        for line in block:
            if not line.strip():
                continue
            indent = len(line) - len(line.lstrip())
            if indent <= base or not entries:
                entries.append([line.strip()])
            else:
                entries[-1].append(line.strip())
        return [" ".join(parts) for parts in entries]

    @staticmethod
    def _section_tag(tag_name: str, entry: str) -> TagEntry:
        if tag_name == "param":
            match = _GOOGLE_ARG.match(entry)
            if match is None:
                return GenericTag(normalize_string(entry))
            type_expr = re.sub(r",\s*optional\s*$", "", match.group("type") or "")
            return ParamTag(
                parse_type_hints(type_expr),
                match.group("name").lstrip("*"),
                normalize_string(match.group("desc")),
            )
        match = _GOOGLE_TYPED.match(entry)
        if tag_name == "throws":
            if match is None:
                return ThrowsTag("", normalize_string(entry))
            return ThrowsTag(match.group("type"), normalize_string(match.group("desc")))
        if match is None:
            return ValueTag((), normalize_string(entry))
        return ValueTag(parse_type_hints(match.group("type")), normalize_string(match.group("desc")))

    @staticmethod
    def _apply_types(
        tags: dict[str, list[TagEntry]],
        param_types: dict[str, str],
        return_type: str | None,
    ) -> None:
        """Merge ``:type x:`` and ``:rtype:`` fields into their param/return tags."""
        if param_types:
            tags["param"] = [
                replace(entry, type_hints=parse_type_hints(param_types[entry.name]))
                if isinstance(entry, ParamTag)
                and not entry.type_hints
                and entry.name in param_types
                else entry
                for entry in tags.get("param", [])
            ]
        if return_type is not None:
            returns = tags.setdefault("return", [])
            if returns and isinstance(returns[0], ValueTag):
                returns[0] = replace(returns[0], type_hints=parse_type_hints(return_type))
            else:
                returns.insert(0, ValueTag(parse_type_hints(return_type)))
