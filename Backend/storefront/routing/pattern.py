"""
Route pattern compiler.

A pattern is parsed once into a small tree; both the matching regex and the
URL builder are derived from that same tree, so anything `build()` produces
is something `match()` accepts.

Syntax:
    kontakt                  literal path text
    produkty/<slug>          required parameter, one path segment
    article/<id \\d+>        parameter with a regex constraint
    <lang=cs>                parameter with a default value
    <lang=cs [a-z]{2}>       default value and constraint
    blog[/<slug>]            optional group (may nest, may hold parameters)

Constraints may not contain '<' or '>'.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Tuple, Union
from urllib.parse import quote, unquote


DEFAULT_CONSTRAINT = r"[^/]+"

_PARAM_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)(?:=(\S*))?(?:\s+(.+))?$", re.DOTALL)


class PatternSyntaxError(ValueError):
    """Raised when a route pattern cannot be parsed."""
    def __init__(self, message: str, pattern: str):
        self.message = message
        self.pattern = pattern
        super().__init__(f"{message} in route pattern {pattern!r}")


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Param:
    name: str
    constraint: Optional[str] = None
    default: Optional[str] = None

    @property
    def regex(self) -> str:
        return self.constraint or DEFAULT_CONSTRAINT


@dataclass(frozen=True)
class OptionalGroup:
    children: Tuple["Node", ...]


Node = Union[Literal, Param, OptionalGroup]


def _escape_segment(text: str) -> str:
    return text.replace("%", "%25").replace("/", "%2F")


def decode_path(path: str) -> str:
    """
    Percent-decode a raw URL path segment by segment.

    '%' and '/' stay encoded inside a segment, so an encoded slash never
    becomes a segment boundary:

        "produkty/r%C5%AF%C5%BEe" -> "produkty/růže"
        "produkty/a%2Fb"          -> "produkty/a%2Fb"
    """
    return "/".join(_escape_segment(unquote(segment)) for segment in path.split("/"))


def tokenize(pattern: str) -> List[Tuple[str, str]]:
    """
    Split a pattern into (kind, value) tokens.

    Kinds: "text", "param" (the raw text between < and >), "open", "close".
    """
    tokens: List[Tuple[str, str]] = []
    buffer: List[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char in "[]<":
            if buffer:
                tokens.append(("text", "".join(buffer)))
                buffer = []
            if char == "[":
                tokens.append(("open", char))
            elif char == "]":
                tokens.append(("close", char))
            else:
                end = pattern.find(">", i + 1)
                if end == -1:
                    raise PatternSyntaxError("Unclosed '<'", pattern)
                tokens.append(("param", pattern[i + 1:end]))
                i = end
        elif char == ">":
            raise PatternSyntaxError("Unexpected '>'", pattern)
        else:
            buffer.append(char)
        i += 1
    if buffer:
        tokens.append(("text", "".join(buffer)))
    return tokens


def _parse_param(raw: str, pattern: str) -> Param:
    match = _PARAM_RE.match(raw.strip())
    if not match:
        raise PatternSyntaxError(f"Invalid parameter <{raw}>", pattern)
    name, default, constraint = match.groups()
    if constraint is not None:
        constraint = constraint.strip()
        try:
            re.compile(constraint)
        except re.error as e:
            raise PatternSyntaxError(f"Invalid constraint for <{name}>: {e}", pattern) from e
    return Param(name=name, constraint=constraint or None, default=default or None)


def parse(pattern: str) -> Tuple[Node, ...]:
    """Parse a pattern into a tuple of nodes."""
    stack: List[List[Node]] = [[]]
    names: Set[str] = set()
    for kind, value in tokenize(pattern):
        if kind == "text":
            stack[-1].append(Literal(value))
        elif kind == "param":
            param = _parse_param(value, pattern)
            if param.name in names:
                raise PatternSyntaxError(f"Duplicate parameter <{param.name}>", pattern)
            names.add(param.name)
            stack[-1].append(param)
        elif kind == "open":
            stack.append([])
        else:
            if len(stack) == 1:
                raise PatternSyntaxError("Unexpected ']'", pattern)
            children = stack.pop()
            stack[-1].append(OptionalGroup(tuple(children)))
    if len(stack) != 1:
        raise PatternSyntaxError("Unclosed '['", pattern)
    return tuple(stack[0])


def _to_regex(nodes: Tuple[Node, ...]) -> str:
    parts = []
    for node in nodes:
        if isinstance(node, Literal):
            parts.append(re.escape(node.text.replace("%", "%25")))
        elif isinstance(node, Param):
            parts.append(f"(?P<{node.name}>(?:{node.regex}))")
        else:
            parts.append(f"(?:{_to_regex(node.children)})?")
    return "".join(parts)


def _collect_params(nodes: Tuple[Node, ...]) -> List[Param]:
    params: List[Param] = []
    for node in nodes:
        if isinstance(node, Param):
            params.append(node)
        elif isinstance(node, OptionalGroup):
            params.extend(_collect_params(node.children))
    return params


class _Unbuildable(Exception):
    pass


@dataclass
class RoutePattern:
    """A parsed pattern with its matcher and builder."""

    source: str
    nodes: Tuple[Node, ...] = field(init=False)
    params: Dict[str, Param] = field(init=False)
    regex: "re.Pattern[str]" = field(init=False)

    def __post_init__(self):
        self.nodes = parse(self.source)
        self.params = {param.name: param for param in _collect_params(self.nodes)}
        try:
            self.regex = re.compile(f"^{_to_regex(self.nodes)}$")
        except re.error as e:
            raise PatternSyntaxError(f"Pattern does not compile: {e}", self.source) from e

    def match(self, path: str) -> Optional[Dict[str, Optional[str]]]:
        """
        Match a relative path (no leading '/') in decode_path() form.

        A trailing '/' is optional on both sides: "kontakt/" matches
        "kontakt" and "en" matches "[<lang>/]". Captured values are
        returned fully decoded.
        """
        stripped = path.rstrip("/")
        for candidate in (stripped, stripped + "/") if stripped else ("",):
            found = self.regex.match(candidate)
            if found:
                return {
                    name: None if value is None else unquote(value)
                    for name, value in found.groupdict().items()
                }
        return None

    def build(
        self,
        values: Mapping[str, str],
        defaults: Mapping[str, str],
    ) -> Optional[str]:
        """
        Render the pattern (without leading '/') or return None.

        Required parameters take the supplied value, falling back to the
        default. Optional groups are rendered only when a parameter inside
        them has a supplied value differing from its default.
        """
        try:
            return self._render(self.nodes, values, defaults)
        except _Unbuildable:
            return None

    def _default_for(self, param: Param, defaults: Mapping[str, str]) -> Optional[str]:
        if param.default is not None:
            return param.default
        return defaults.get(param.name)

    def _render(
        self,
        nodes: Tuple[Node, ...],
        values: Mapping[str, str],
        defaults: Mapping[str, str],
    ) -> str:
        out = []
        for node in nodes:
            if isinstance(node, Literal):
                out.append(quote(node.text, safe="/-._~!$&'()*+,;=:@"))
            elif isinstance(node, Param):
                value = values.get(node.name)
                if value is None or value == "":
                    value = self._default_for(node, defaults)
                # Constraints apply to the same form match() sees
                if value is None or not re.fullmatch(node.regex, _escape_segment(value)):
                    raise _Unbuildable(node.name)
                out.append(quote(value, safe="-._~"))
            elif self._group_is_set(node, values, defaults):
                out.append(self._render(node.children, values, defaults))
        return "".join(out)

    def _group_is_set(
        self,
        group: OptionalGroup,
        values: Mapping[str, str],
        defaults: Mapping[str, str],
    ) -> bool:
        for param in _collect_params(group.children):
            value = values.get(param.name)
            if value is not None and value != "" and value != self._default_for(param, defaults):
                return True
        return False
