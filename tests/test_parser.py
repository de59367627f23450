import pytest

from import_optimizer.errors import FatalMalformation
from import_optimizer.models import BindingKind
from import_optimizer.models import NamedBinding
from import_optimizer.parser import classify
from import_optimizer.parser import parse_declaration


def test_parse_binding_kinds():
    side_effect = parse_declaration("import './polyfill';", 0)
    assert side_effect.binding_kind is BindingKind.SIDE_EFFECT
    assert side_effect.module_path == "./polyfill"

    default = parse_declaration('import React from "react"', 0)
    assert default.binding_kind is BindingKind.DEFAULT
    assert default.default_binding == "React"
    assert default.quote == '"'

    namespace = parse_declaration("import * as path from 'path';", 0)
    assert namespace.binding_kind is BindingKind.NAMESPACE
    assert namespace.namespace_binding == "path"

    named = parse_declaration("import {a, b as c,} from 'x';", 0)
    assert named.binding_kind is BindingKind.NAMED
    assert named.named_bindings == (NamedBinding("a"), NamedBinding("b", "c"))

    mixed = parse_declaration("import React, {useState} from 'react';", 0)
    assert mixed.binding_kind is BindingKind.MIXED
    assert mixed.default_binding == "React"
    assert mixed.named_bindings == (NamedBinding("useState"),)


def test_parse_trailing_comment():
    decl = parse_declaration("import {a} from 'x'; // used by tests", 0)
    assert not decl.opaque
    assert decl.trailing_comment == "// used by tests"


@pytest.mark.parametrize(
    "statement, path",
    [
        ("import type {Props} from './types';", "./types"),
        ("import fs = require('fs');", "fs"),
        ("import data from './data.json' with {type: 'json'};", "./data.json"),
        ("import {a} from 'x'; doSomething();", "x"),
        ("import {a, a} from 'x';", "x"),
        ("import foo", None),
    ],
)
def test_unparseable_statements_are_opaque(statement, path):
    decl = parse_declaration(statement, 3)
    assert decl.opaque
    assert decl.module_path == path
    assert decl.raw_text == statement
    assert decl.binding_kind is None


def test_classify_splits_region_and_body():
    text = "import b from 'b';\n\nimport a from 'a';\n\n\nconst x = 1;\nimport late from 'late';\n"
    document = classify(text)
    assert [d.module_path for d in document.declarations] == ["b", "a"]
    assert document.body == "const x = 1;\nimport late from 'late';\n"


def test_classify_multiline_statement():
    text = "import {\n  b,\n  a,\n} from 'x';\nrun();\n"
    document = classify(text)
    (decl,) = document.declarations
    assert decl.raw_text == "import {\n  b,\n  a,\n} from 'x';"
    assert decl.named_bindings == (NamedBinding("b"), NamedBinding("a"))
    assert document.body == "run();\n"


def test_classify_comment_inside_binding_list():
    text = "import {\n  b, // second\n  a, /* first */\n} from 'x'; // tail\nrun();\n"
    (decl,) = classify(text).declarations
    assert not decl.opaque
    assert decl.named_bindings == (NamedBinding("b"), NamedBinding("a"))
    assert decl.inner_comments == ("// second", "/* first */")
    assert decl.trailing_comment == "// tail"


def test_classify_trailing_block_comment_spanning_lines():
    text = "import b from 'b'; /* note\n  more */\nfoo();\n"
    document = classify(text)
    (decl,) = document.declarations
    assert decl.trailing_comment == "/* note\n  more */"
    assert document.body == "foo();\n"


def test_classify_statement_with_from_on_next_line():
    document = classify("import React\n  from 'react';\n")
    (decl,) = document.declarations
    assert decl.default_binding == "React"
    assert document.body == ""


def test_classify_comments_and_header():
    text = (
        "#!/usr/bin/env node\n"
        "/*\n"
        " * License\n"
        " */\n"
        "\n"
        "// for b\n"
        "import b from 'b';\n"
        "/* for a */\n"
        "import a from 'a';\n"
        "// belongs to the body\n"
        "main();\n"
    )
    document = classify(text)
    assert document.header == ("#!/usr/bin/env node", "/*", " * License", " */")
    assert document.header_gap
    first, second = document.declarations
    assert first.leading_comments == ("// for b",)
    assert second.leading_comments == ("/* for a */",)
    assert document.body == "// belongs to the body\nmain();\n"


def test_classify_without_imports_keeps_everything_as_body():
    text = "// nothing to see\n\nexport const x = import('lazy');\n"
    document = classify(text)
    assert not document.has_imports
    assert document.body == text


def test_dynamic_import_ends_region():
    document = classify("import a from 'a';\nimport('b').then(run);\n")
    assert len(document.declarations) == 1
    assert document.body == "import('b').then(run);\n"


def test_classify_detects_crlf():
    document = classify("import a from 'a';\r\n\r\nfoo();\r\n")
    assert document.newline == "\r\n"
    assert document.body == "foo();\r\n"


def test_parse_warning_is_collected():
    document = classify("import type {A} from './a';\nimport b from 'b';\n")
    assert document.declarations[0].opaque
    assert len(document.warnings) == 1
    lineno, message = document.warnings[0]
    assert lineno == 1
    assert message.startswith("IO101")


def test_unterminated_binding_list_is_fatal():
    with pytest.raises(FatalMalformation) as excinfo:
        classify("import {\n  a,\n  b\n")
    assert excinfo.value.lineno == 1


def test_unterminated_block_comment_is_fatal():
    with pytest.raises(FatalMalformation):
        classify("import a from 'a';\n/* never closed\n")


def test_unterminated_trailing_comment_is_fatal():
    with pytest.raises(FatalMalformation) as excinfo:
        classify("import a from 'a';\nimport b from 'b'; /* never closed\n")
    assert excinfo.value.lineno == 2
    assert excinfo.value.reason == "unterminated comment in import statement"
