"""
JS/TS Import Extractor
======================

Extracts raw import specifiers from JavaScript and TypeScript source text.
Supports ES6 modules, CommonJS, dynamic imports and re-exports.
Loads path aliases from tsconfig.json and jsconfig.json.

Extraction is lexical: no parse tree is built, so syntactically broken files
still yield whatever import statements can be recognized.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


# import x from 'm' / import { a, b } from 'm' / import * as ns from 'm' / import 'm'
ES6_IMPORT_RE = re.compile(r"""\bimport\s+(?:[\w$*{}\s,]+?\s+from\s+)?['"]([^'"\n]+)['"]""")
# require('m')
COMMONJS_RE = re.compile(r"""\brequire\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")
# import('m')
DYNAMIC_IMPORT_RE = re.compile(r"""\bimport\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")
# export { a } from 'm' / export * from 'm' / export * as ns from 'm'
EXPORT_FROM_RE = re.compile(r"""\bexport\s+(?:[\w$*{}\s,]+?)\s+from\s+['"]([^'"\n]+)['"]""")

# String literals first so comment markers inside them are left alone
COMMENT_OR_STRING_RE = re.compile(
    r"""'(?:\\.|[^'\\\n])*'"""
    r'|"(?:\\.|[^"\\\n])*"'
    r"|`(?:\\.|[^`\\])*`"
    r"|//[^\n]*"
    r"|/\*.*?\*/",
    re.DOTALL,
)

PATTERNS = [
    ("es6", ES6_IMPORT_RE),
    ("commonjs", COMMONJS_RE),
    ("dynamic", DYNAMIC_IMPORT_RE),
    ("export-from", EXPORT_FROM_RE),
]

ALIAS_CONFIG_FILES = ["tsconfig.json", "jsconfig.json"]


class JSImportInfo:
    """Represents a single import statement in JS/TS."""

    def __init__(
        self,
        module: str,
        import_type: str = "es6",
        line_number: int = 0,
    ):
        self.module = module
        self.import_type = import_type  # "es6", "commonjs", "dynamic", "export-from"
        self.line_number = line_number

    @property
    def is_dynamic(self) -> bool:
        return self.import_type == "dynamic"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "module": self.module,
            "import_type": self.import_type,
            "is_dynamic": self.is_dynamic,
            "line_number": self.line_number,
        }

    def __repr__(self) -> str:
        return f"JSImportInfo({self.module!r}, {self.import_type!r}, line={self.line_number})"


def _blank_comments(content: str) -> str:
    """Replace comments with whitespace, keeping line numbers stable.

    Quoted and template strings pass through untouched, so a ``//`` or
    ``/*`` inside a literal never swallows the code after it.
    """

    def blank(match: re.Match) -> str:
        text = match.group(0)
        if text.startswith("/"):
            return re.sub(r"[^\n]", " ", text)
        return text

    return COMMENT_OR_STRING_RE.sub(blank, content)


class JSDependencyParser:
    """Extracts import specifiers from JavaScript/TypeScript source."""

    def parse(self, content: str) -> list[JSImportInfo]:
        """
        Extract all imports from source text.

        Each (module, import_type) pair is reported once, at its first
        occurrence, in source order.
        """
        code = _blank_comments(content)
        imports: list[JSImportInfo] = []
        seen: set[tuple[str, str]] = set()

        for import_type, pattern in PATTERNS:
            for match in pattern.finditer(code):
                module = match.group(1).strip()
                if not module or (module, import_type) in seen:
                    continue
                seen.add((module, import_type))
                line_number = code.count("\n", 0, match.start(1)) + 1
                imports.append(JSImportInfo(module, import_type, line_number))

        imports.sort(key=lambda imp: imp.line_number)
        return imports

    def parse_file(self, file_path: Path) -> list[JSImportInfo]:
        """
        Read a file and extract its imports.

        Raises:
            OSError, UnicodeDecodeError: If the file cannot be read
        """
        return self.parse(Path(file_path).read_text(encoding="utf-8"))

    def extract_specifiers(self, content: str) -> list[str]:
        """Distinct raw specifiers in first-seen order."""
        return list(dict.fromkeys(imp.module for imp in self.parse(content)))


def load_path_aliases(project_root: Path) -> dict[str, str]:
    """
    Load path aliases from tsconfig.json or jsconfig.json.

    "@/*": ["src/*"] with baseUrl "." becomes {"@": "<root>/src"}.
    Only the first target of each alias is used. A config file that cannot be
    parsed is logged and ignored.
    """
    project_root = Path(project_root)
    aliases: dict[str, str] = {}

    for config_file in ALIAS_CONFIG_FILES:
        config_path = project_root / config_file
        if not config_path.is_file():
            continue
        try:
            config = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Could not read path aliases from %s: %s", config_path, e)
            break

        compiler_options = config.get("compilerOptions", {}) if isinstance(config, dict) else {}
        paths = compiler_options.get("paths", {}) or {}
        base_dir = (project_root / compiler_options.get("baseUrl", ".")).resolve()

        for alias, targets in paths.items():
            if not targets:
                continue
            alias_key = alias.rstrip("/*")
            target = targets[0].rstrip("/*")
            aliases[alias_key] = str(base_dir / target)
            logger.debug("Path alias %s -> %s", alias_key, aliases[alias_key])
        break

    return aliases
