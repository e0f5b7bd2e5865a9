"""
Commit message templates.

Templates use the action syntax commit message authors already know from Git
tooling written in Go:

    {{ .type }}{{ if .breaking_change }}!{{ end }}: {{ .header }}

Supported actions are output (`{{ pipeline }}`), `if` / `else if` / `else` /
`end`, comments (`{{/* ... */}}`) and the `{{-` / `-}}` whitespace trimming
markers. Pipelines may call `not`, `and`, `or`, `eq`, `ne`, `lt`, `le`, `gt`,
`ge` and `len`, with parenthesised sub-expressions.

The template is translated into an equivalent Jinja2 template and rendered by
Jinja2. Literal text never passes through the Jinja2 lexer: it is handed to the
template as data, so whitespace, newlines and stray braces come out exactly as
written.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

import jinja2
from loguru import logger

from ..exceptions import TemplateExecutionError, TemplateParseError


ACTION_PATTERN = re.compile(r"\{\{(?:(-)(?=\s))?(.*?)(?:(?<=\s)(-))?\}\}", re.DOTALL)

TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<string>"(?:[^"\\\n]|\\.)*")
  | (?P<raw>`[^`]*`)
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<field>\.[A-Za-z_][A-Za-z0-9_]*|\.)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<lparen>\()
  | (?P<rparen>\))
    """,
    re.VERBOSE,
)

FIELDS = "__fields__"
LITERALS = "__literals__"

UNSUPPORTED_ACTIONS = {"range", "with", "define", "template", "block", "break", "continue"}


class MissingField(jinja2.Undefined):
    """A field the form does not define: false in conditions, `<no value>` in output."""
    
    def __str__(self) -> str:
        return "<no value>"


def _finalize(value: Any) -> Any:
    """Print booleans the way Go templates do."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


@dataclass
class _Token:
    kind: str
    text: str


@dataclass
class _Segment:
    """A piece of the source: either literal text or an action body."""
    
    text: str
    is_action: bool = False
    trim_left: bool = False
    trim_right: bool = False


class _Translator:
    """Translate Go-style template source into Jinja2 source."""
    
    def __init__(self, source: str):
        self.source = source
        self.literals: List[str] = []
        self.blocks: List[str] = []
        self.fields: List[str] = []
    
    def literal(self, value: str) -> str:
        self.literals.append(value)
        return f"{LITERALS}[{len(self.literals) - 1}]"
    
    def split(self) -> List[_Segment]:
        """Cut the source into text and action segments, applying trim markers."""
        segments: List[_Segment] = []
        position = 0
        for match in ACTION_PATTERN.finditer(self.source):
            segments.append(_Segment(self.source[position:match.start()]))
            segments.append(_Segment(
                match.group(2),
                is_action=True,
                trim_left=bool(match.group(1)),
                trim_right=bool(match.group(3)),
            ))
            position = match.end()
        segments.append(_Segment(self.source[position:]))
        
        for index, segment in enumerate(segments):
            if not segment.is_action:
                if "{{" in segment.text:
                    raise TemplateParseError("unclosed action")
                continue
            if segment.trim_left:
                segments[index - 1].text = segments[index - 1].text.rstrip()
            if segment.trim_right:
                segments[index + 1].text = segments[index + 1].text.lstrip()
        return segments
    
    def translate(self) -> str:
        parts = []
        for segment in self.split():
            if segment.is_action:
                parts.append(self.action(segment.text.strip()))
            elif segment.text:
                parts.append("{{ " + self.literal(segment.text) + " }}")
        
        if self.blocks:
            raise TemplateParseError(f"unexpected EOF: unclosed {{{{{self.blocks[-1]}}}}}")
        return "".join(parts)
    
    def action(self, body: str) -> str:
        if body.startswith("/*"):
            if not body.endswith("*/"):
                raise TemplateParseError("unclosed comment")
            return ""
        if not body:
            raise TemplateParseError("missing value for command")
        
        tokens = self.tokenize(body)
        head = tokens[0]
        
        if head.kind == "ident" and head.text == "if":
            self.blocks.append("if")
            return "{% if " + self.pipeline(tokens[1:], "if") + " %}"
        
        if head.kind == "ident" and head.text == "else":
            if not self.blocks or self.blocks[-1] not in ("if", "else if"):
                raise TemplateParseError("unexpected {{else}}")
            rest = tokens[1:]
            if rest and rest[0].kind == "ident" and rest[0].text == "if":
                self.blocks[-1] = "else if"
                return "{% elif " + self.pipeline(rest[1:], "else if") + " %}"
            if rest:
                raise TemplateParseError("unexpected tokens after {{else}}")
            self.blocks[-1] = "else"
            return "{% else %}"
        
        if head.kind == "ident" and head.text == "end":
            if len(tokens) > 1:
                raise TemplateParseError("unexpected tokens after {{end}}")
            if not self.blocks:
                raise TemplateParseError("unexpected {{end}}")
            self.blocks.pop()
            return "{% endif %}"
        
        if head.kind == "ident" and head.text in UNSUPPORTED_ACTIONS:
            raise TemplateParseError(f"unsupported action: {head.text}")
        
        return "{{ " + self.pipeline(tokens, "output") + " }}"
    
    def tokenize(self, body: str) -> List[_Token]:
        tokens = []
        position = 0
        while position < len(body):
            match = TOKEN_PATTERN.match(body, position)
            if not match:
                raise TemplateParseError(f"unexpected {body[position]!r} in action {{{{ {body} }}}}")
            if match.lastgroup != "ws":
                tokens.append(_Token(match.lastgroup, match.group()))
            position = match.end()
        return tokens
    
    def pipeline(self, tokens: List[_Token], context: str) -> str:
        if not tokens:
            raise TemplateParseError(f"missing value for {context}")
        expression, position = self.command(tokens, 0)
        if position != len(tokens):
            raise TemplateParseError(f"unexpected {tokens[position].text!r} in {context}")
        return expression
    
    def command(self, tokens: List[_Token], position: int):
        """Parse a function call or a single operand, stopping at ')' or the end."""
        head = tokens[position]
        if head.kind == "ident" and head.text not in ("true", "false", "nil"):
            name = head.text
            args = []
            position += 1
            while position < len(tokens) and tokens[position].kind != "rparen":
                arg, position = self.operand(tokens, position)
                args.append(arg)
            return self.call(name, args), position
        return self.operand(tokens, position)
    
    def operand(self, tokens: List[_Token], position: int):
        token = tokens[position]
        if token.kind == "lparen":
            if position + 1 >= len(tokens):
                raise TemplateParseError("unclosed left paren")
            inner, position = self.command(tokens, position + 1)
            if position >= len(tokens) or tokens[position].kind != "rparen":
                raise TemplateParseError("unclosed left paren")
            return f"({inner})", position + 1
        if token.kind == "field":
            if token.text == ".":
                return FIELDS, position + 1
            self.fields.append(token.text[1:])
            return f"{FIELDS}[{self.literal(token.text[1:])}]", position + 1
        if token.kind == "string":
            try:
                value = json.loads(token.text)
            except ValueError as e:
                raise TemplateParseError(f"invalid string literal {token.text}") from e
            return self.literal(value), position + 1
        if token.kind == "raw":
            return self.literal(token.text[1:-1]), position + 1
        if token.kind == "number":
            return token.text, position + 1
        if token.kind == "ident" and token.text in ("true", "false"):
            return token.text, position + 1
        if token.kind == "ident" and token.text == "nil":
            return "none", position + 1
        if token.kind == "ident":
            raise TemplateParseError(f"function {token.text!r} must be called in parentheses")
        raise TemplateParseError(f"unexpected {token.text!r}")
    
    def call(self, name: str, args: List[str]) -> str:
        if name == "not":
            self.arity(name, args, 1, 1)
            return f"(not {args[0]})"
        if name in ("and", "or"):
            self.arity(name, args, 1, None)
            return "(" + f" {name} ".join(args) + ")"
        if name == "eq":
            self.arity(name, args, 2, None)
            return "(" + " or ".join(f"{args[0]} == {other}" for other in args[1:]) + ")"
        if name in ("ne", "lt", "le", "gt", "ge"):
            self.arity(name, args, 2, 2)
            operator = {"ne": "!=", "lt": "<", "le": "<=", "gt": ">", "ge": ">="}[name]
            return f"({args[0]} {operator} {args[1]})"
        if name == "len":
            self.arity(name, args, 1, 1)
            return f"({args[0]} | length)"
        raise TemplateParseError(f'function "{name}" not defined')
    
    @staticmethod
    def arity(name: str, args: List[str], minimum: int, maximum: Optional[int]) -> None:
        if len(args) < minimum or (maximum is not None and len(args) > maximum):
            raise TemplateParseError(f"wrong number of args for {name}: got {len(args)}")


class MessageTemplate:
    """A compiled commit message template."""
    
    def __init__(self, source: str):
        if not source:
            raise TemplateParseError("template string is empty")
        self.source = source
        
        translator = _Translator(source)
        jinja_source = translator.translate()
        self._literals = translator.literals
        self.fields = list(dict.fromkeys(translator.fields))
        
        environment = jinja2.Environment(
            undefined=MissingField,
            keep_trailing_newline=True,
            autoescape=False,
            finalize=_finalize,
        )
        try:
            self._template = environment.from_string(jinja_source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateParseError(f"failed to parse template: {e}") from e
    
    def render(self, values: Mapping[str, Any]) -> str:
        """Substitute values into the template."""
        fields = dict(values)
        missing = [name for name in self.fields if name not in fields]
        if missing:
            logger.debug(f"Template references fields without a value: {', '.join(missing)}")
        for name in missing:
            fields[name] = MissingField(name=name)
        try:
            return self._template.render({FIELDS: fields, LITERALS: self._literals})
        except (jinja2.TemplateError, TypeError) as e:
            raise TemplateExecutionError(f"failed to execute template: {e}") from e


def render_message(template: str, values: Mapping[str, Any]) -> str:
    """Render template with values, raising TemplateParseError or TemplateExecutionError."""
    message = MessageTemplate(template).render(values)
    logger.debug(f"Rendered message ({len(message)} characters)")
    return message
