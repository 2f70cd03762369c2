# presenter.py - 把 AnalysisResult 转成页面各个区域的视图数据（纯函数，不抛异常）

from models import BUCKET_FIELDS
from session import DEFAULT_TAB, TABS

PLACEHOLDER = "-"

TAB_LABELS = {
    "lexical": "词法分析",
    "syntax": "语法树",
    "semantic": "语义分析",
    "symbols": "符号表",
}

# token 类别 -> 样式；不在表中的类别一律使用 DEFAULT_TOKEN_STYLE
TOKEN_STYLES = {
    'KEYWORD':     {'bg': '#e3f2fd', 'fg': '#1565c0'},
    'IDENTIFIER':  {'bg': '#f3e5f5', 'fg': '#6a1b9a'},
    'NUMBER':      {'bg': '#e8f5e9', 'fg': '#2e7d32'},
    'STRING':      {'bg': '#fff3e0', 'fg': '#e65100'},
    'OPERATOR':    {'bg': '#fce4ec', 'fg': '#ad1457'},
    'DELIMITER':   {'bg': '#eceff1', 'fg': '#37474f'},
    'PARENTHESIS': {'bg': '#eceff1', 'fg': '#37474f'},
    'COMMA':       {'bg': '#eceff1', 'fg': '#37474f'},
    'COLON':       {'bg': '#eceff1', 'fg': '#37474f'},
    'NEWLINE':     {'bg': '#fafafa', 'fg': '#9e9e9e'},
    'COMMENT':     {'bg': '#f1f8e9', 'fg': '#558b2f'},
    'UNKNOWN':     {'bg': '#ffebee', 'fg': '#c62828'},
}
DEFAULT_TOKEN_STYLE = {'bg': '#f5f5f5', 'fg': '#424242'}

# 符号类型 -> 颜色，与 token 样式表相互独立
SYMBOL_TYPE_STYLES = {
    'int':      '#1565c0',
    'float':    '#00838f',
    'string':   '#e65100',
    'bool':     '#6a1b9a',
    'function': '#2e7d32',
}
DEFAULT_SYMBOL_COLOR = '#616161'

# (标签, AnalysisResult 字段名)
CATEGORY_FIELDS = [
    ("保留字", "reserved_words"),
    ("运算符", "operators"),
    ("数字", "numbers"),
    ("符号", "symbols"),
    ("字符串", "strings"),
    ("注释", "comments"),
    ("建议", "suggestions"),
    ("语法错误", "syntax_errors"),
    ("语义错误", "semantic_errors"),
]

_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def token_style(token_type):
    return TOKEN_STYLES.get(token_type, DEFAULT_TOKEN_STYLE)


def symbol_color(symbol_type):
    return SYMBOL_TYPE_STYLES.get(symbol_type, DEFAULT_SYMBOL_COLOR)


def escape_value(value):
    """换行、制表符等控制字符转成可见的字面量，例如换行 -> \\n。"""
    return "".join(_ESCAPES.get(ch, ch) for ch in value or "")


def _category_items(field, items):
    if field in ("syntax_errors", "semantic_errors"):
        return [d.as_text() for d in items]
    if field == "strings":
        return [f'"{s}"' for s in items]
    return list(items)


def category_rows(result):
    """分类表：每行是 标签 / 内容 / 数量；空或缺失时内容为占位符 "-"。"""
    rows = []
    for label, field in CATEGORY_FIELDS:
        items = getattr(result, field, None) or []
        shown = _category_items(field, items)
        rows.append({
            'label': label,
            'items': shown,
            'text': ", ".join(shown) if shown else PLACEHOLDER,
            'count': len(items),
        })
    # 与汇总区同一口径：totals 优先，否则取符号表长度
    rows.append({
        'label': "标识符（近似）",
        'items': [],
        'text': PLACEHOLDER,
        'count': summary(result)['counts']['identifiers'],
    })
    return rows


def token_chips(tokens):
    chips = []
    for tok in tokens or []:
        chips.append({
            'type': tok.type,
            'label': escape_value(tok.value),
            'style': token_style(tok.type),
            'line': tok.line,
            'column': tok.column,
        })
    return chips


def tree_rows(forest):
    """
    先序遍历语法树森林，每个节点输出一行并记录其相对所在根的深度。
    用显式栈遍历（TreeNode.walk），任意深度都不会触发递归上限。
    """
    return [
        {
            'type': node.type,
            'value': node.value,
            'line': node.line,
            'depth': depth,
        }
        for root in forest or []
        for node, depth in root.walk()
    ]


def symbol_rows(symbols):
    return [
        {
            'name': sym.name,
            'type': sym.type,
            'value': sym.value,
            'line': sym.line,
            'scope': sym.scope,
            'used': "是" if sym.used else "否",
            'color': symbol_color(sym.type),
        }
        for sym in symbols or []
    ]


def diagnostics_section(diagnostics):
    """
    诊断区分三种状态：
    - absent：分析服务没有返回该字段
    - clean：返回了空列表，明确显示"无错误"
    - errors：有错误
    """
    if diagnostics is None:
        return {'state': 'absent', 'items': [], 'count': 0}
    items = [
        {
            'line': d.line,
            'text': d.as_text(),
            'message': d.message,
            'type': d.type,
            'variable': d.variable,
            'expected_type': d.expected_type,
            'actual_type': d.actual_type,
            'severity': d.severity,
        }
        for d in diagnostics
    ]
    return {'state': 'errors' if items else 'clean', 'items': items, 'count': len(items)}


def _count(items):
    return len(items) if items is not None else 0


def summary(result):
    """
    汇总各类别数量。默认取对应集合的长度；
    如果 totals 中给出了某个类别的值，则只在显示上以该值为准，不修改结果本身。
    """
    counts = {
        'tokens': _count(result.tokens),
        'nodes': sum(node.count() for node in result.syntax_tree or []),
        'symbolTable': _count(result.symbol_table),
        'identifiers': _count(result.symbol_table),
        'syntaxErrors': _count(result.syntax_errors),
        'semanticErrors': _count(result.semantic_errors),
    }
    # 分类计数使用线上字段名，这样 totals 中的同名键才能覆盖
    for wire, attr in BUCKET_FIELDS.items():
        counts[wire] = _count(getattr(result, attr))

    overrides = result.totals or {}
    for key, value in overrides.items():
        counts[key] = value
    if 'errors' not in overrides:
        counts['errors'] = counts['syntaxErrors'] + counts['semanticErrors']

    return {
        'counts': counts,
        'syntax_valid': result.syntax_valid,
        'semantic_valid': result.semantic_valid,
    }


def present(result, active_tab=DEFAULT_TAB):
    """组装整个结果区的视图数据。"""
    if active_tab not in TABS:
        active_tab = DEFAULT_TAB
    return {
        'tabs': [{'id': t, 'label': TAB_LABELS[t], 'active': t == active_tab} for t in TABS],
        'active_tab': active_tab,
        'categories': category_rows(result),
        'has_tokens': result.tokens is not None,
        'tokens': token_chips(result.tokens),
        'has_tree': result.syntax_tree is not None,
        'tree': tree_rows(result.syntax_tree),
        'has_symbols': result.symbol_table is not None,
        'symbols': symbol_rows(result.symbol_table),
        'syntax_errors': diagnostics_section(result.syntax_errors),
        'semantic_errors': diagnostics_section(result.semantic_errors),
        'summary': summary(result),
    }
