"""
Python Import Extractor
=======================

Extracts imports from Python source files using AST parsing.

Every imported name is reported as a dotted specifier so the resolver can
decide whether it names a submodule or an attribute:

    import a.b              -> "a.b"
    from a import b, c      -> "a.b", "a.c"
    from .pkg import thing  -> ".pkg.thing"
    from .. import util     -> "..util"
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any


class ImportInfo:
    """Represents a single imported module or name."""

    def __init__(
        self,
        module: str,
        name: str | None = None,
        alias: str | None = None,
        level: int = 0,
        line_number: int = 0,
    ):
        self.module = module
        self.name = name  # for "from module import name"
        self.alias = alias
        self.level = level  # 0=absolute, 1=., 2=.., etc.
        self.line_number = line_number

    @property
    def import_type(self) -> str:
        return "relative" if self.level > 0 else "absolute"

    @property
    def specifier(self) -> str:
        """Dotted specifier including leading dots for relative imports."""
        parts = [p for p in (self.module, self.name) if p and p != "*"]
        return "." * self.level + ".".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "module": self.module,
            "name": self.name,
            "alias": self.alias,
            "import_type": self.import_type,
            "level": self.level,
            "line_number": self.line_number,
        }

    def __repr__(self) -> str:
        return f"ImportInfo({self.specifier!r}, line={self.line_number})"


class PythonDependencyParser:
    """Parses Python source to extract imports."""

    def parse(self, content: str, filename: str = "<unknown>") -> list[ImportInfo]:
        """
        Extract all imports from source text.

        Raises:
            SyntaxError: If the source cannot be parsed
        """
        tree = ast.parse(content, filename=filename)
        imports: list[ImportInfo] = []

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                # import module [, module2]
                for alias in node.names:
                    imports.append(
                        ImportInfo(
                            module=alias.name,
                            alias=alias.asname,
                            line_number=node.lineno,
                        )
                    )

            elif isinstance(node, ast.ImportFrom):
                # from module import name / from . import name / from ..pkg import name
                for alias in node.names:
                    imports.append(
                        ImportInfo(
                            module=node.module or "",
                            name=alias.name,
                            alias=alias.asname,
                            level=node.level,
                            line_number=node.lineno,
                        )
                    )

        imports.sort(key=lambda imp: imp.line_number)
        return imports

    def parse_file(self, file_path: Path) -> list[ImportInfo]:
        """
        Read a file and extract its imports.

        Raises:
            OSError, UnicodeDecodeError: If the file cannot be read
            SyntaxError: If the source cannot be parsed
        """
        file_path = Path(file_path)
        return self.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))

    def extract_specifiers(self, content: str, filename: str = "<unknown>") -> list[str]:
        """Distinct dotted specifiers in source order."""
        return list(dict.fromkeys(imp.specifier for imp in self.parse(content, filename)))
