import re
from typing import Any, Dict, List, Optional, Tuple

from .config import LayoutConfig, SegmentSpec
from .geometry import Point2D
from .lexer import Token, tokenize_line

_ERROR_LOC_RE = re.compile(r"\[line (\d+), col (\d+)\]")

_SEGMENT_OPTIONS = ('density',)


class Cursor:
    def __init__(self, tokens: List[Token]):
        self.toks = tokens
        self.i = 0

    def peek(self):
        return self.toks[self.i] if self.i < len(self.toks) else None

    def match(self, *types: str):
        if self.i < len(self.toks) and self.toks[self.i][0] in types:
            t = self.toks[self.i]
            self.i += 1
            return t
        return None

    def expect(self, *types: str):
        t = self.peek()
        if t and t[0] in types:
            self.i += 1
            return t
        want = '|'.join(types)
        if t:
            raise SyntaxError(f'[line {t[2]}, col {t[3]}] expected {want}, got {t[0]}')
        raise SyntaxError(f'Unexpected end of line: expected {want}')


def parse_number(cur: Cursor) -> float:
    negative = cur.match('DASH') is not None
    t = cur.expect('NUMBER')
    value = float(t[1])
    return -value if negative else value


def parse_point(cur: Cursor) -> Point2D:
    cur.expect('LPAREN')
    x = parse_number(cur)
    cur.expect('COMMA')
    y = parse_number(cur)
    cur.expect('RPAREN')
    return (x, y)


def parse_arrow(cur: Cursor) -> bool:
    t = cur.peek()
    if not t or t[0] != 'DASH':
        return False
    nxt = cur.toks[cur.i + 1] if cur.i + 1 < len(cur.toks) else None
    if not nxt or nxt[0] != 'GT':
        raise SyntaxError(f"[line {t[2]}, col {t[3]}] expected '->'")
    cur.i += 2
    return True


def parse_point_chain(cur: Cursor) -> List[Point2D]:
    points = [parse_point(cur)]
    while parse_arrow(cur):
        points.append(parse_point(cur))
    if len(points) < 2:
        t = cur.peek()
        raise SyntaxError(f"[line {t[2] if t else 0}, col {t[3] if t else 0}] expected '->' point in chain")
    return points


def parse_opts(cur: Cursor) -> Dict[str, Any]:
    opts: Dict[str, Any] = {}
    if not cur.match('LBRACK'):
        return opts
    need_sep = False
    while True:
        t = cur.peek()
        if not t:
            raise SyntaxError('unterminated options block')
        if t[0] == 'RBRACK':
            cur.i += 1
            break
        if need_sep and t[0] == 'COMMA':
            cur.i += 1
            need_sep = False
            continue
        k = cur.expect('ID')
        key = k[1].lower()
        if key not in _SEGMENT_OPTIONS:
            raise SyntaxError(f'[line {k[2]}, col {k[3]}] unknown segment option "{k[1]}"')
        cur.expect('EQUAL')
        opts[key] = parse_number(cur)
        need_sep = True
    return opts


def parse_stmt(tokens: List[Token]) -> Tuple[str, Dict[str, Any]]:
    cur = Cursor(tokens)
    t0 = cur.expect('ID')
    kw = t0[1].lower()
    cur.match('COLON')

    if kw == 'center':
        stmt = ('center', {'point': parse_point(cur)})
    elif kw == 'density':
        stmt = ('density', {'value': parse_number(cur)})
    elif kw == 'segment':
        start = parse_point(cur)
        if not parse_arrow(cur):
            t = cur.peek()
            raise SyntaxError(f"[line {t[2] if t else t0[2]}, col {t[3] if t else 0}] expected '->' after segment start")
        end = parse_point(cur)
        stmt = ('segment', {'points': [start, end], 'opts': parse_opts(cur)})
    elif kw == 'polyline':
        points = parse_point_chain(cur)
        stmt = ('polyline', {'points': points, 'opts': parse_opts(cur)})
    else:
        raise SyntaxError(f'[line {t0[2]}, col {t0[3]}] unknown statement "{t0[1]}"')

    trailing = cur.peek()
    if trailing:
        raise SyntaxError(f"[line {trailing[2]}, col {trailing[3]}] unexpected token {trailing[1]!r}")
    return stmt


def _augment_syntax_error(err: SyntaxError, line_text: str) -> Optional[SyntaxError]:
    message = str(err)
    if not line_text or "\n" in message:
        return None
    match = _ERROR_LOC_RE.search(message)
    if not match:
        return None
    col = max(int(match.group(2)), 1)
    caret_line = " " * (col - 1) + "^"
    snippet = f"    {line_text.rstrip()}\n    {caret_line}"
    return SyntaxError(f"{message}\n{snippet}")


def parse_layout(text: str) -> LayoutConfig:
    """Parse the line-oriented layout format into a :class:`LayoutConfig`.

    ``center`` and ``density`` may appear anywhere in the file; segment
    densities are only resolved against the default when the layout is built.
    """

    center: Optional[Point2D] = None
    density: Optional[float] = None
    segments: List[SegmentSpec] = []

    for i, raw in enumerate(text.splitlines(), start=1):
        tokens = tokenize_line(raw, i)
        if not tokens:
            continue
        try:
            kind, data = parse_stmt(tokens)
            if kind in ('center', 'density'):
                if (center if kind == 'center' else density) is not None:
                    raise SyntaxError(f'[line {i}, col {tokens[0][3]}] duplicate "{kind}" statement')
                if kind == 'center':
                    center = data['point']
                else:
                    density = data['value']
                continue
        except SyntaxError as err:
            augmented = _augment_syntax_error(err, raw)
            if augmented is None:
                raise
            raise augmented from None

        seg_density = data['opts'].get('density')
        points = data['points']
        for start, end in zip(points, points[1:]):
            segments.append(SegmentSpec(start=start, end=end, density=seg_density))

    if center is None:
        raise SyntaxError('layout is missing a "center" statement')
    if density is None:
        raise SyntaxError('layout is missing a "density" statement')
    return LayoutConfig(center_point=center, density=density, segments=segments)


__all__ = ["Cursor", "parse_layout", "parse_stmt"]
