"""
分析结果的数据模型。

分析服务不受我们控制，不同版本返回的字段子集也不同，所以每个响应体只在
AnalysisResult.from_payload 处规范化一次。之后的代码可以放心依赖下面的结构：
字段要么是 None（未返回），要么是文档中写明的类型。
"""

from dataclasses import dataclass, field


def _as_list(value):
    return value if isinstance(value, list) else None


def _as_int(value, default=0):
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


def _as_str(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _opt_str(value):
    return value if isinstance(value, str) and value != "" else None


@dataclass
class Token:
    """
    一个已分类的词法单元。
    - type：类别（KEYWORD、IDENTIFIER 等），开放集合，未知类别原样保留
    - column：线上字段为 column 或 col
    - position：源码中的偏移，分析服务不一定提供
    """

    type: str
    value: str
    line: int = 0
    column: int = 0
    position: int | None = None

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return None
        column = data.get("column", data.get("col"))
        position = data.get("position")
        return cls(
            type=_as_str(data.get("type")) or "UNKNOWN",
            value=_as_str(data.get("value")),
            line=_as_int(data.get("line")),
            column=_as_int(column),
            position=_as_int(position, None),
        )

    def to_dict(self):
        d = {"type": self.type, "value": self.value, "line": self.line, "column": self.column}
        if self.position is not None:
            d["position"] = self.position
        return d


@dataclass(repr=False, eq=False)
class TreeNode:
    """
    语法树节点，子节点只属于父节点（严格树，无回指）。
    树的深度没有上限，所以构造、计数、序列化都用显式栈，不用递归。
    """

    type: str
    value: str | None = None
    line: int = 0
    children: list["TreeNode"] = field(default_factory=list)

    @classmethod
    def _one(cls, data):
        return cls(
            type=_as_str(data.get("type")) or "UNKNOWN",
            value=_opt_str(data.get("value")),
            line=_as_int(data.get("line")),
        )

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return None
        root = cls._one(data)
        stack = [(root, data)]
        while stack:
            node, raw = stack.pop()
            for c in _as_list(raw.get("children")) or []:
                if isinstance(c, dict):
                    child = cls._one(c)
                    node.children.append(child)
                    stack.append((child, c))
        return root

    def walk(self):
        """先序遍历，产出 (节点, 相对本节点的深度)。"""
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            # 逆序入栈，保证按原顺序出栈
            for child in reversed(node.children):
                stack.append((child, depth + 1))

    def count(self):
        """本子树的节点数（含自身）。"""
        return sum(1 for _ in self.walk())

    def to_dict(self):
        root = {}
        stack = [(self, root)]
        while stack:
            node, d = stack.pop()
            d["type"] = node.type
            d["line"] = node.line
            if node.value is not None:
                d["value"] = node.value
            if node.children:
                d["children"] = [{} for _ in node.children]
                stack.extend(zip(node.children, d["children"]))
        return root

    def __repr__(self):
        return f"TreeNode(type={self.type!r}, value={self.value!r}, line={self.line}, children={len(self.children)})"


@dataclass
class Symbol:
    """符号表条目（每个作用域中每个名字一条）。"""

    name: str
    type: str = ""
    value: str = ""
    line: int = 0
    scope: str = ""
    used: bool = False

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict) or not _as_str(data.get("name")):
            return None
        return cls(
            name=_as_str(data.get("name")),
            type=_as_str(data.get("type")),
            value=_as_str(data.get("value")),
            line=_as_int(data.get("line")),
            scope=_as_str(data.get("scope")),
            used=data.get("used") is True,
        )

    def to_dict(self):
        return {
            "name": self.name,
            "type": self.type,
            "value": self.value,
            "line": self.line,
            "scope": self.scope,
            "used": self.used,
        }


@dataclass
class Diagnostic:
    """
    语法或语义错误。有的分析服务直接返回字符串而不是对象，
    这种情况下 line 为 None，message 即整个字符串。
    """

    line: int | None
    message: str
    type: str | None = None
    variable: str | None = None
    expected_type: str | None = None
    actual_type: str | None = None
    severity: str | None = None

    @classmethod
    def from_value(cls, data):
        if isinstance(data, str):
            return cls(line=None, message=data)
        if not isinstance(data, dict):
            return None
        return cls(
            line=_as_int(data.get("line"), None),
            message=_as_str(data.get("message")),
            type=_opt_str(data.get("type")),
            variable=_opt_str(data.get("variable")),
            expected_type=_opt_str(data.get("expectedType")),
            actual_type=_opt_str(data.get("actualType")),
            severity=_opt_str(data.get("severity")),
        )

    def as_text(self):
        if self.line is None:
            return self.message
        return f"Line {self.line}: {self.message}"

    def to_dict(self):
        d = {"line": self.line, "message": self.message}
        for key, value in (
            ("type", self.type),
            ("variable", self.variable),
            ("expectedType", self.expected_type),
            ("actualType", self.actual_type),
            ("severity", self.severity),
        ):
            if value is not None:
                d[key] = value
        return d


# 线上字段名 -> 属性名
BUCKET_FIELDS = {
    "reservedWords": "reserved_words",
    "operators": "operators",
    "numbers": "numbers",
    "symbols": "symbols",
    "strings": "strings",
    "comments": "comments",
    "suggestions": "suggestions",
}


def _parse_items(value, parse):
    items = _as_list(value)
    if items is None:
        return None
    return [item for item in (parse(v) for v in items) if item is not None]


def _bucket_item(value):
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _parse_totals(value):
    if not isinstance(value, dict):
        return None
    totals = {}
    for key, count in value.items():
        count = _as_int(count, None)
        if isinstance(key, str) and count is not None:
            totals[key] = count
    return totals


@dataclass
class AnalysisResult:
    """
    一次提交得到的全部分析结果，所有字段都可选。
    None 表示分析服务没有返回该字段；空列表表示返回了空集合。
    """

    tokens: list[Token] | None = None
    syntax_tree: list[TreeNode] | None = None
    symbol_table: list[Symbol] | None = None
    semantic_errors: list[Diagnostic] | None = None
    syntax_errors: list[Diagnostic] | None = None
    reserved_words: list[str] | None = None
    operators: list[str] | None = None
    numbers: list[str] | None = None
    symbols: list[str] | None = None
    strings: list[str] | None = None
    comments: list[str] | None = None
    suggestions: list[str] | None = None
    totals: dict[str, int] | None = None
    syntax_valid: bool | None = None
    semantic_valid: bool | None = None

    @classmethod
    def from_payload(cls, payload):
        """规范化解码后的 JSON；结构不对的字段按未返回处理。"""
        if not isinstance(payload, dict):
            return cls()

        buckets = {
            attr: _parse_items(payload.get(wire), _bucket_item)
            for wire, attr in BUCKET_FIELDS.items()
        }
        syntax_valid = payload.get("syntaxValid")
        semantic_valid = payload.get("semanticValid")
        return cls(
            tokens=_parse_items(payload.get("tokens"), Token.from_dict),
            syntax_tree=_parse_items(payload.get("syntaxTree"), TreeNode.from_dict),
            symbol_table=_parse_items(payload.get("symbolTable"), Symbol.from_dict),
            semantic_errors=_parse_items(payload.get("semanticErrors"), Diagnostic.from_value),
            syntax_errors=_parse_items(payload.get("syntaxErrors"), Diagnostic.from_value),
            totals=_parse_totals(payload.get("totals")),
            syntax_valid=syntax_valid if isinstance(syntax_valid, bool) else None,
            semantic_valid=semantic_valid if isinstance(semantic_valid, bool) else None,
            **buckets,
        )

    def to_dict(self):
        """按线上格式重新序列化，省略未返回的字段。"""
        d = {}
        for key, items in (
            ("tokens", self.tokens),
            ("syntaxTree", self.syntax_tree),
            ("symbolTable", self.symbol_table),
            ("semanticErrors", self.semantic_errors),
            ("syntaxErrors", self.syntax_errors),
        ):
            if items is not None:
                d[key] = [item.to_dict() for item in items]
        for wire, attr in BUCKET_FIELDS.items():
            items = getattr(self, attr)
            if items is not None:
                d[wire] = list(items)
        if self.totals is not None:
            d["totals"] = dict(self.totals)
        if self.syntax_valid is not None:
            d["syntaxValid"] = self.syntax_valid
        if self.semantic_valid is not None:
            d["semanticValid"] = self.semantic_valid
        return d
