#!/usr/bin/env python3
"""
Tests for Dependency Parsers
=============================

Tests the import extractors for Python and JavaScript/TypeScript including:
- Python import extraction (absolute, relative, from imports)
- JS/TS import extraction (ES6, CommonJS, dynamic, re-exports)
- Comment handling and line numbers
- Syntax error handling
- tsconfig/jsconfig path alias loading
"""

import json
from pathlib import Path

import pytest

from archgraph.dependency.js_parser import JSDependencyParser, JSImportInfo, load_path_aliases
from archgraph.dependency.python_parser import ImportInfo, PythonDependencyParser


# =============================================================================
# PYTHON PARSER TESTS
# =============================================================================

class TestPythonParserBasicImportExtraction:
    """Tests for basic Python import extraction."""

    def test_extracts_absolute_import(self, temp_dir: Path):
        """Extracts simple absolute import."""
        code = """import os
import sys
"""
        test_file = temp_dir / "test.py"
        test_file.write_text(code)

        parser = PythonDependencyParser()
        imports = parser.parse_file(test_file)

        assert len(imports) == 2
        assert imports[0].module == "os"
        assert imports[0].import_type == "absolute"
        assert imports[1].module == "sys"

    def test_extracts_import_with_alias(self):
        """Extracts import with alias."""
        imports = PythonDependencyParser().parse("import numpy as np\nimport pandas as pd\n")

        assert len(imports) == 2
        assert imports[0].module == "numpy"
        assert imports[0].alias == "np"
        assert imports[1].alias == "pd"

    def test_extracts_from_import_per_name(self):
        """'from X import Y, Z' yields one entry per imported name."""
        imports = PythonDependencyParser().parse("from os import path, environ\n")

        assert [imp.specifier for imp in imports] == ["os.path", "os.environ"]
        assert all(imp.module == "os" for imp in imports)

    def test_extracts_submodule_imports(self):
        """Dotted module names are kept whole."""
        imports = PythonDependencyParser().parse("import os.path\nfrom collections.abc import Mapping\n")

        assert imports[0].specifier == "os.path"
        assert imports[1].specifier == "collections.abc.Mapping"

    def test_imports_inside_functions_are_found(self):
        """Lazy imports inside function bodies count too."""
        code = """def load():
    import json
    return json
"""
        imports = PythonDependencyParser().parse(code)

        assert [imp.module for imp in imports] == ["json"]
        assert imports[0].line_number == 2


class TestPythonParserRelativeImports:
    """Tests for relative import handling."""

    def test_single_dot_import(self):
        """from .module import name"""
        imports = PythonDependencyParser().parse("from .models import User\n")

        assert imports[0].level == 1
        assert imports[0].import_type == "relative"
        assert imports[0].specifier == ".models.User"

    def test_double_dot_import(self):
        """from ..package import name"""
        imports = PythonDependencyParser().parse("from ..utils import helpers\n")

        assert imports[0].level == 2
        assert imports[0].specifier == "..utils.helpers"

    def test_bare_dot_import(self):
        """from . import sibling"""
        imports = PythonDependencyParser().parse("from . import sibling\n")

        assert imports[0].module == ""
        assert imports[0].specifier == ".sibling"

    def test_star_import_drops_the_star(self):
        """from .module import * resolves to the module itself."""
        imports = PythonDependencyParser().parse("from .module import *\n")

        assert imports[0].specifier == ".module"


class TestPythonParserErrors:
    """Tests for error handling."""

    def test_syntax_error_raises(self):
        """Broken source is reported to the caller."""
        with pytest.raises(SyntaxError):
            PythonDependencyParser().parse("def broken(:\n    pass\n")

    def test_missing_file_raises(self, temp_dir: Path):
        """Unreadable files are reported to the caller."""
        with pytest.raises(OSError):
            PythonDependencyParser().parse_file(temp_dir / "missing.py")

    def test_extract_specifiers_is_distinct(self):
        """Repeated imports collapse to one specifier."""
        code = """import os
import os
from os import path
"""
        specifiers = PythonDependencyParser().extract_specifiers(code)

        assert specifiers == ["os", "os.path"]

    def test_import_info_to_dict(self):
        """ImportInfo serializes its fields."""
        info = ImportInfo(module="pkg", name="thing", level=1, line_number=3)

        data = info.to_dict()

        assert data["module"] == "pkg"
        assert data["name"] == "thing"
        assert data["import_type"] == "relative"
        assert data["line_number"] == 3


# =============================================================================
# JS/TS PARSER TESTS
# =============================================================================

class TestJSParserES6Imports:
    """Tests for ES6 import extraction."""

    @pytest.mark.parametrize(
        "code, module",
        [
            ("import React from 'react';", "react"),
            ('import { useState, useEffect } from "react";', "react"),
            ("import * as utils from './utils';", "./utils"),
            ("import React, { useState } from 'react';", "react"),
            ("import './styles.css';", "./styles.css"),
            ("import type { Props } from './types';", "./types"),
        ],
    )
    def test_extracts_es6_forms(self, code: str, module: str):
        """Every ES6 import form yields its module specifier."""
        imports = JSDependencyParser().parse(code)

        assert [imp.module for imp in imports] == [module]
        assert imports[0].import_type == "es6"

    def test_multiline_named_import(self):
        """Named imports spanning several lines are recognized."""
        code = """import {
  Button,
  Card,
} from './components';
"""
        imports = JSDependencyParser().parse(code)

        assert [imp.module for imp in imports] == ["./components"]
        assert imports[0].line_number == 4


class TestJSParserOtherForms:
    """Tests for CommonJS, dynamic imports and re-exports."""

    def test_commonjs_require(self):
        """require() calls are extracted."""
        code = """const fs = require('fs');
const { join } = require("path");
require('./side-effect');
"""
        imports = JSDependencyParser().parse(code)

        assert [imp.module for imp in imports] == ["fs", "path", "./side-effect"]
        assert all(imp.import_type == "commonjs" for imp in imports)

    def test_dynamic_import(self):
        """import() expressions are extracted and flagged dynamic."""
        imports = JSDependencyParser().parse("const page = await import('./pages/home');")

        assert len(imports) == 1
        assert imports[0].module == "./pages/home"
        assert imports[0].is_dynamic

    def test_export_from(self):
        """Re-exports count as imports."""
        code = """export * from './a';
export { b } from './b';
export * as c from './c';
"""
        imports = JSDependencyParser().parse(code)

        assert [imp.module for imp in imports] == ["./a", "./b", "./c"]
        assert all(imp.import_type == "export-from" for imp in imports)

    def test_plain_exports_are_not_imports(self):
        """Exports without a source module are ignored."""
        code = """export const x = 1;
export default function main() {}
module.exports = { x };
"""
        assert JSDependencyParser().parse(code) == []


class TestJSParserComments:
    """Tests for comment handling."""

    def test_ignores_line_comments(self):
        """Commented-out imports are skipped."""
        code = """// import old from './old';
import current from './current';
"""
        imports = JSDependencyParser().parse(code)

        assert [imp.module for imp in imports] == ["./current"]

    def test_ignores_block_comments_and_keeps_line_numbers(self):
        """Block comments are skipped without shifting line numbers."""
        code = """/*
import old from './old';
*/
import current from './current';
"""
        imports = JSDependencyParser().parse(code)

        assert [imp.module for imp in imports] == ["./current"]
        assert imports[0].line_number == 4

    def test_comment_markers_inside_strings(self):
        """A glob or URL in a string does not hide the imports after it."""
        code = """const pattern = '/static/*';
const url = "http://example.com";
const a = require('./a');
/* closing */
const b = require('./b');
"""
        imports = JSDependencyParser().parse(code)

        assert [imp.module for imp in imports] == ["./a", "./b"]
        assert [imp.line_number for imp in imports] == [3, 5]

    def test_ignores_trailing_line_comments(self):
        """An import commented out at the end of a line is skipped."""
        code = "const a = require('./a'); // require('./old')\n"

        assert JSDependencyParser().extract_specifiers(code) == ["./a"]

    def test_line_numbers_after_blank_lines_and_comments(self):
        """Line numbers count blank lines and every kind of comment."""
        code = """

// header
/* one
   two */
import a from './a';   // trailing
const b = require('./b');
"""
        imports = JSDependencyParser().parse(code)

        assert [(imp.module, imp.line_number) for imp in imports] == [("./a", 6), ("./b", 7)]

    def test_extract_specifiers_is_distinct(self):
        """The same module imported twice is reported once."""
        code = """import a from './shared';
const b = require('./shared');
"""
        assert JSDependencyParser().extract_specifiers(code) == ["./shared"]

    def test_import_info_to_dict(self):
        """JSImportInfo serializes its fields."""
        data = JSImportInfo("./x", "dynamic", line_number=7).to_dict()

        assert data == {"module": "./x", "import_type": "dynamic", "is_dynamic": True, "line_number": 7}


class TestPathAliases:
    """Tests for tsconfig/jsconfig alias loading."""

    def test_loads_tsconfig_paths(self, temp_dir: Path):
        """compilerOptions.paths are resolved against baseUrl."""
        (temp_dir / "tsconfig.json").write_text(
            json.dumps({"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["src/*"], "~lib": ["lib"]}}})
        )

        aliases = load_path_aliases(temp_dir)

        assert aliases["@"] == str((temp_dir / "src").resolve())
        assert aliases["~lib"] == str((temp_dir / "lib").resolve())

    def test_falls_back_to_jsconfig(self, temp_dir: Path):
        """jsconfig.json is used when there is no tsconfig.json."""
        (temp_dir / "jsconfig.json").write_text(json.dumps({"compilerOptions": {"paths": {"#app/*": ["app/*"]}}}))

        assert "#app" in load_path_aliases(temp_dir)

    def test_invalid_config_is_ignored(self, temp_dir: Path):
        """A broken tsconfig.json yields no aliases instead of failing."""
        (temp_dir / "tsconfig.json").write_text("{ not json")

        assert load_path_aliases(temp_dir) == {}

    def test_no_config_files(self, temp_dir: Path):
        """No config files means no aliases."""
        assert load_path_aliases(temp_dir) == {}
