"""Markdown -> HTML compilation with {{ directive }} placeholders kept as typed nodes"""

import re
import shlex

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_inline import StateInline

from mdsite.core.errors import DirectiveSyntaxError
from mdsite.core.models import Directive, Segment


OPEN, CLOSE = '{{', '}}'
BLOCK_DIRECTIVE_RE = re.compile(r'\{\{((?:(?!\}\}).)*)\}\}')
NAME_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_-]*')
KEY_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_-]*')
# markdown-it replaces NUL in its input, so it never occurs in rendered text
SENTINEL_RE = re.compile('\x00(\\d+)\x00')


def parse_directive(text: str, source: str, line: int) -> Directive:
    """Parse the inside of {{ ... }} into a Directive: a name then key=value pairs."""
    try:
        parts = shlex.split(text)
    except ValueError as e:
        raise DirectiveSyntaxError(source, line, f"malformed directive '{{{{{text}}}}}': {e}") from e
    if not parts:
        raise DirectiveSyntaxError(source, line, "empty directive")

    name, *args = parts
    if not NAME_RE.fullmatch(name):
        raise DirectiveSyntaxError(source, line, f"invalid directive name '{name}'")

    params: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition('=')
        if not sep:
            raise DirectiveSyntaxError(source, line, f"expected key=value in '{name}', got '{arg}'")
        if not KEY_RE.fullmatch(key):
            raise DirectiveSyntaxError(source, line, f"invalid parameter name '{key}' in '{name}'")
        if key in params:
            raise DirectiveSyntaxError(source, line, f"duplicate parameter '{key}' in '{name}'")
        params[key] = value
    return Directive(name=name, params=params, source=source, line=line)


# --- markdown-it rules ---

def _directive_block(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """A line holding nothing but one {{ ... }} becomes a block-level directive."""
    if state.sCount[startLine] - state.blkIndent >= 4:
        return False
    pos = state.bMarks[startLine] + state.tShift[startLine]
    line = state.src[pos:state.eMarks[startLine]].strip()
    m = BLOCK_DIRECTIVE_RE.fullmatch(line)
    if not m:
        return False
    if silent:
        return True

    token = state.push('directive', '', 0)
    token.block = True
    token.content = m.group(1)
    token.map = [startLine, startLine + 1]
    state.line = startLine + 1
    return True


def _directive_inline(state: StateInline, silent: bool) -> bool:
    """{{ ... }} inside running text; unbalanced markers are recorded as error tokens."""
    src, pos = state.src, state.pos
    if src.startswith(CLOSE, pos):
        if silent:
            return False
        token = state.push('directive_error', '', 0)
        token.content = CLOSE
        token.meta = {'offset': pos, 'message': "unmatched '}}' without an opening '{{'"}
        state.pos = pos + 2
        return True
    if not src.startswith(OPEN, pos):
        return False

    end = src.find(CLOSE, pos + 2)
    newline = src.find('\n', pos + 2)
    if end == -1 or (newline != -1 and newline < end):
        if silent:
            return False
        token = state.push('directive_error', '', 0)
        token.content = src[pos:newline if newline != -1 else len(src)]
        token.meta = {'offset': pos, 'message': f"unclosed directive '{token.content.strip()}'"}
        state.pos = pos + 2
        return True

    if not silent:
        token = state.push('directive', '', 0)
        token.content = src[pos + 2:end]
        token.meta = {'offset': pos}
    state.pos = end + 2
    return True


def _render_directive(self, tokens, idx, options, env) -> str:
    return f"\x00{tokens[idx].meta['index']}\x00"


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset with directive rules installed."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    md.block.ruler.before(
        'paragraph', 'directive_block', _directive_block,
        {'alt': ['paragraph', 'reference', 'blockquote', 'list']},
    )
    md.inline.ruler.push('directive', _directive_inline)
    md.add_render_rule('directive', _render_directive)
    return md


def _collect_directives(tokens: list, source: str, line_offset: int) -> list[Directive]:
    """Turn directive tokens into Directive nodes, numbering them in document order.

    Raw HTML and image alt text have no place for a rendered fragment, so a
    directive found there is a DirectiveSyntaxError.
    """
    directives: list[Directive] = []

    def _take(token, line: int) -> None:
        if token.type == 'directive_error':
            raise DirectiveSyntaxError(source, line, token.meta['message'])
        token.meta = {**(token.meta or {}), 'index': len(directives)}
        directives.append(parse_directive(token.content, source, line))

    def _reject_html(text: str, line: int) -> None:
        m = BLOCK_DIRECTIVE_RE.search(text)
        if m:
            line += text[:m.start()].count('\n')
            raise DirectiveSyntaxError(source, line, f"directive '{m.group(0)}' not allowed in raw HTML")

    def _reject_alt(children, line: int) -> None:
        for child in children or ():
            if child.type in ('directive', 'directive_error'):
                raise DirectiveSyntaxError(source, line, "directive not allowed in image text")
            _reject_alt(child.children, line)

    last_map = [0, 0]
    for tok in tokens:
        if tok.map:
            last_map = tok.map
        line = line_offset + last_map[0] + 1
        if tok.type == 'directive':
            _take(tok, line)
        elif tok.type == 'html_block':
            _reject_html(tok.content, line)
        elif tok.type == 'inline' and tok.children:
            for child in tok.children:
                if child.type in ('directive', 'directive_error'):
                    _take(child, line + tok.content[:child.meta['offset']].count('\n'))
                elif child.type == 'html_inline':
                    _reject_html(child.content, line)
                elif child.type == 'image':
                    _reject_alt(child.children, line)
    return directives


def compile_markdown(
    body: str,
    source: str,
    line_offset: int = 0,
    preset: str = 'gfm-like',
    ) -> tuple[Segment, ...]:
    """Render body to HTML, leaving each directive as a Directive node in place.

    line_offset is the number of file lines preceding body (the frontmatter),
    so directive line numbers refer to the source file.
    """
    md = _make_parser(preset)
    env: dict = {}
    tokens = md.parse(body, env)
    directives = _collect_directives(tokens, source, line_offset)
    html = md.renderer.render(tokens, md.options, env)

    segments: list[Segment] = []
    for i, part in enumerate(SENTINEL_RE.split(html)):
        if i % 2:
            segments.append(directives[int(part)])
        elif part:
            segments.append(part)
    return tuple(segments)
