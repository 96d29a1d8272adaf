"""
Unit tests for traversal.py

Tests doc comment association, signature reconstruction, import and
interface extraction, and file-level aggregation.
"""

import unittest
from pathlib import Path

from inspection.models import FuncOption
from inspection.parser import parse_bytes, parse_file
from inspection.printer import GoPrinter
from inspection.errors import RenderError
from inspection.traversal import (
    EmbeddedIdentifier,
    EmbeddedSelector,
    NamedMethod,
    classify_interface_member,
    clean_doc_comment,
    get_doc_comment,
    inspect_tree,
    is_directive,
    parse_file_funcs,
    parse_file_imports,
    parse_file_interfaces,
    parse_function,
    receiver_type_name,
    strip_import_quotes,
)

FIXTURES = Path(__file__).parent / "fixtures"

SCENARIO_SRC = b'// doc\nfunc Foo() string { return "x" }\nfunc bar() string { return "y" }\n'

TEST_FILE_SRC = b"""package testfile

import "fmt"

// I'm a comment for ExportedFunctionOne
func ExportedFunctionOne() string {
	return fmt.Sprint("ExportedFunctionOne")
}

// I'm a comment for UnexportedFunctionOne
func unexportedFunctionOne() string {
	return fmt.Sprint("ExportedFunctionOne")
}
"""


def _function_nodes(tree):
    return [
        child for child in tree.root_node.named_children
        if child.type in ("function_declaration", "method_declaration")
    ]


class TestDocComments(unittest.TestCase):
    """Test doc comment detection and cleaning."""

    def test_clean_line_comments(self):
        """Test that line comment markers are removed."""
        self.assertEqual(clean_doc_comment(["// Hello", "// world"]), "Hello\nworld")

    def test_clean_block_comment(self):
        """Test that block comment markers are removed."""
        self.assertEqual(clean_doc_comment(["/* Hello\n   world */"]), "Hello\n   world")

    def test_clean_collapses_blank_lines(self):
        """Test that blank lines are trimmed and collapsed."""
        text = clean_doc_comment(["//", "// First", "//", "//", "// Second", "//"])
        self.assertEqual(text, "First\n\nSecond")

    def test_clean_drops_directives(self):
        """Test that tool directives are not documentation."""
        self.assertEqual(clean_doc_comment(["// Doc", "//go:generate stringer"]), "Doc")
        self.assertEqual(clean_doc_comment(["//go:noinline"]), "")

    def test_is_directive(self):
        """Test directive recognition."""
        self.assertTrue(is_directive("go:embed x"))
        self.assertTrue(is_directive("line foo.go:10"))
        self.assertTrue(is_directive("export Foo"))
        self.assertFalse(is_directive(" go:embed x"))
        self.assertFalse(is_directive("Hello: world"))

    def test_doc_comment_directly_above(self):
        """Test a comment on the line directly above the declaration."""
        tree = parse_bytes(b"package p\n\n// Doc line\nfunc F() {}\n")
        start, text = get_doc_comment(_function_nodes(tree)[0])
        self.assertEqual(text, "Doc line")
        self.assertEqual(start, len(b"package p\n\n"))

    def test_blank_line_breaks_association(self):
        """Test that a blank line detaches the comment."""
        tree = parse_bytes(b"package p\n\n// Detached\n\nfunc F() {}\n")
        start, text = get_doc_comment(_function_nodes(tree)[0])
        self.assertIsNone(start)
        self.assertEqual(text, "")

    def test_group_stops_at_blank_line(self):
        """Test that the group ends at the first blank line going up."""
        source = b"package p\n\n// Unrelated\n\n// First\n// Second\nfunc F() {}\n"
        tree = parse_bytes(source)
        _, text = get_doc_comment(_function_nodes(tree)[0])
        self.assertEqual(text, "First\nSecond")

    def test_no_comment(self):
        """Test a declaration with no comment."""
        tree = parse_bytes(b"package p\n\nfunc F() {}\n")
        self.assertEqual(get_doc_comment(_function_nodes(tree)[0]), (None, ""))


class TestParseFunction(unittest.TestCase):
    """Test signature reconstruction for functions and methods."""

    def test_scenario_exported_function(self):
        """Test an exported function with a one-line doc."""
        tree = parse_bytes(SCENARIO_SRC)
        fn = parse_function(_function_nodes(tree)[0], SCENARIO_SRC)

        self.assertEqual(fn.name, "Foo")
        self.assertEqual(fn.signature, "func Foo() string")
        self.assertEqual(fn.documentation, "doc")
        self.assertTrue(fn.is_exported)

    def test_function_with_doc(self):
        """Test signature and doc of a documented function."""
        tree = parse_bytes(TEST_FILE_SRC)
        fn = parse_function(_function_nodes(tree)[0], TEST_FILE_SRC)

        self.assertEqual(fn.name, "ExportedFunctionOne")
        self.assertEqual(fn.signature, "func ExportedFunctionOne() string")
        self.assertEqual(fn.documentation, "I'm a comment for ExportedFunctionOne")

    def test_signature_never_contains_doc(self):
        """Test that signatures hold neither the doc comment nor the body."""
        tree = parse_bytes(TEST_FILE_SRC)
        for node in _function_nodes(tree):
            fn = parse_function(node, TEST_FILE_SRC)
            self.assertTrue(fn.documentation)
            self.assertNotIn(fn.documentation, fn.signature)
            self.assertNotIn("//", fn.signature)
            self.assertNotIn("{", fn.signature)

    def test_multibyte_doc_offsets(self):
        """Test that multibyte doc text does not shift the signature."""
        source = "package p\n\n// Größe berechnet die Größe. ✓\nfunc Size() int { return 1 }\n".encode("utf-8")
        tree = parse_bytes(source)
        fn = parse_function(_function_nodes(tree)[0], source)

        self.assertEqual(fn.signature, "func Size() int")
        self.assertEqual(fn.documentation, "Größe berechnet die Größe. ✓")

    def test_forward_declaration_is_skipped(self):
        """Test that a declaration without a body gives no function."""
        source = b"package p\n\n// Implemented in assembly.\nfunc archSqrt(x float64) float64\n"
        tree = parse_bytes(source)
        self.assertIsNone(parse_function(_function_nodes(tree)[0], source))

    def test_render_failure_is_absence(self):
        """Test that a render failure gives no function."""
        class FailingPrinter(GoPrinter):
            def render_declaration(self, node, source, doc_start=None):
                raise RenderError("boom")

        tree = parse_bytes(SCENARIO_SRC)
        self.assertIsNone(parse_function(_function_nodes(tree)[0], SCENARIO_SRC, FailingPrinter()))

    def test_method_signatures(self):
        """Test pointer and value receiver methods."""
        tree, source = parse_file(str(FIXTURES / "methods.go"))
        funcs = {f.name: f for f in (parse_function(n, source) for n in _function_nodes(tree)) if f}

        self.assertEqual(funcs["Close"].signature, "func (s *Server) Close() error")
        self.assertEqual(
            funcs["Close"].documentation,
            "Close stops the server.\n\nIt is safe to call Close twice.",
        )
        self.assertEqual(funcs["Close"].receiver, "Server")
        self.assertEqual(funcs["Name"].signature, "func (s Server) Name() string")
        self.assertEqual(funcs["Name"].receiver, "Server")

    def test_multiline_parameters_print_on_one_line(self):
        """Test that a multi-line parameter list prints on one line."""
        tree, source = parse_file(str(FIXTURES / "methods.go"))
        funcs = {f.name: f for f in (parse_function(n, source) for n in _function_nodes(tree)) if f}

        self.assertEqual(
            funcs["Serve"].signature,
            "func (s *Server) Serve(ctx context.Context, r io.Reader, opts ...string) (int, error)",
        )

    def test_directive_only_comment_is_not_documentation(self):
        """Test that a directive-only comment leaves the doc empty."""
        tree, source = parse_file(str(FIXTURES / "methods.go"))
        funcs = {f.name: f for f in (parse_function(n, source) for n in _function_nodes(tree)) if f}

        self.assertEqual(funcs["helper"].signature, "func helper(a, b int) int")
        self.assertEqual(funcs["helper"].documentation, "")

    def test_generic_function(self):
        """Test a function with type parameters."""
        tree, source = parse_file(str(FIXTURES / "methods.go"))
        funcs = {f.name: f for f in (parse_function(n, source) for n in _function_nodes(tree)) if f}

        self.assertEqual(
            funcs["Map"].signature,
            "func Map[T any, U any](xs []T, f func(T) U) []U",
        )
        self.assertEqual(funcs["Map"].receiver, "")

    def test_receiver_type_name_generic(self):
        """Test the base type name of a generic receiver."""
        source = b"package p\n\nfunc (l *List[T]) Len() int { return 0 }\n"
        tree = parse_bytes(source)
        self.assertEqual(receiver_type_name(_function_nodes(tree)[0]), "List")


class TestParseFileFuncs(unittest.TestCase):
    """Test the visibility filter over a whole file."""

    def test_scenario_exported_only(self):
        """Test the exported-only filter."""
        tree = parse_bytes(SCENARIO_SRC)
        funcs = parse_file_funcs(tree, SCENARIO_SRC, FuncOption.EXPORTED)

        self.assertEqual([f.name for f in funcs], ["Foo"])
        self.assertEqual(funcs[0].signature, "func Foo() string")
        self.assertEqual(funcs[0].documentation, "doc")

    def test_scenario_both(self):
        """Test that both exported and unexported functions are kept."""
        tree = parse_bytes(SCENARIO_SRC)
        funcs = parse_file_funcs(tree, SCENARIO_SRC, FuncOption.BOTH)

        self.assertEqual([f.name for f in funcs], ["Foo", "bar"])
        self.assertEqual(funcs[1].documentation, "")
        self.assertEqual(funcs[1].signature, "func bar() string")

    def test_unexported_only(self):
        """Test the unexported-only filter."""
        tree = parse_bytes(TEST_FILE_SRC)
        funcs = parse_file_funcs(tree, TEST_FILE_SRC, FuncOption.UNEXPORTED)
        self.assertEqual([f.name for f in funcs], ["unexportedFunctionOne"])

    def test_exported_filter_matches_predicate(self):
        """Test that the exported filter agrees with the name predicate."""
        tree, source = parse_file(str(FIXTURES / "methods.go"))
        all_funcs = parse_file_funcs(tree, source, FuncOption.BOTH)
        exported = parse_file_funcs(tree, source, FuncOption.EXPORTED)

        self.assertEqual(
            [f.name for f in exported],
            [f.name for f in all_funcs if f.name[0].isupper()],
        )

    def test_custom_visibility_predicate(self):
        """Test a caller-supplied visibility predicate."""
        tree = parse_bytes(SCENARIO_SRC)
        funcs = parse_file_funcs(
            tree, SCENARIO_SRC, FuncOption.EXPORTED, predicate=lambda name: name.islower()
        )
        self.assertEqual([f.name for f in funcs], ["bar"])

    def test_deterministic(self):
        """Test that extraction is deterministic."""
        tree_a = parse_bytes(TEST_FILE_SRC)
        tree_b = parse_bytes(TEST_FILE_SRC)
        self.assertEqual(
            parse_file_funcs(tree_a, TEST_FILE_SRC),
            parse_file_funcs(tree_b, TEST_FILE_SRC),
        )


class TestImports(unittest.TestCase):
    """Test import path extraction."""

    def test_strip_quotes(self):
        """Test stripping double quotes and backquotes."""
        self.assertEqual(strip_import_quotes('"fmt"'), "fmt")
        self.assertEqual(strip_import_quotes("`net/http`"), "net/http")

    def test_strip_quotes_without_matching_pair(self):
        """Test that unmatched quotes are left alone."""
        self.assertEqual(strip_import_quotes('"fmt'), '"fmt')
        self.assertEqual(strip_import_quotes("fmt"), "fmt")

    def test_single_import(self):
        """Test a single import declaration."""
        tree = parse_bytes(TEST_FILE_SRC)
        self.assertEqual(parse_file_imports(tree), ["fmt"])

    def test_grouped_aliased_and_duplicate_imports(self):
        """Test grouped, aliased and repeated imports."""
        source = b'package p\n\nimport (\n\t"fmt"\n\tstdlog "log"\n\t_ "embed"\n)\n\nimport "fmt"\n'
        tree = parse_bytes(source)
        self.assertEqual(parse_file_imports(tree), ["fmt", "log", "embed", "fmt"])


class TestInterfaces(unittest.TestCase):
    """Test interface extraction."""

    def test_scenario_reader(self):
        """Test an interface with an embedded selector and a method."""
        source = b"package p\n\ntype Reader interface { io.Reader; Read(p []byte) (n int, err error) }\n"
        tree = parse_bytes(source)
        interfaces = parse_file_interfaces(tree, source)

        self.assertEqual(len(interfaces), 1)
        self.assertEqual(interfaces[0].name, "Reader")
        self.assertEqual(interfaces[0].embedded_interfaces, ["io.Reader"])
        self.assertEqual(interfaces[0].methods, ["Read(p []byte) (n int, err error)"])

    def test_fixture_interfaces(self):
        """Test all interfaces of the fixture file."""
        tree, source = parse_file(str(FIXTURES / "interfaces.go"))
        interfaces = {i.name: i for i in parse_file_interfaces(tree, source)}

        self.assertEqual(list(interfaces), ["Shape", "ReadCloser", "Number", "Lookup"])
        self.assertEqual(interfaces["Shape"].methods, ["Area() float64", "Perimeter() float64"])
        self.assertEqual(interfaces["ReadCloser"].embedded_interfaces, ["io.Reader", "Shape"])
        self.assertEqual(interfaces["ReadCloser"].methods, ["Close() error"])
        self.assertEqual(
            interfaces["Lookup"].methods,
            ["Get(key string) (value []byte, ok bool)", "Set(key string, value []byte)"],
        )

    def test_unknown_members_are_ignored(self):
        """Test that union members are not recorded."""
        tree, source = parse_file(str(FIXTURES / "interfaces.go"))
        number = [i for i in parse_file_interfaces(tree, source) if i.name == "Number"][0]

        self.assertEqual(number.methods, [])
        self.assertEqual(number.embedded_interfaces, [])

    def test_no_interfaces(self):
        """Test a file without interfaces."""
        tree = parse_bytes(TEST_FILE_SRC)
        self.assertEqual(parse_file_interfaces(tree, TEST_FILE_SRC), [])

    def test_classify_members(self):
        """Test classification of each interface member kind."""
        source = b"package p\n\ntype X interface {\n\tStringer\n\tio.Writer\n\tFlush() error\n}\n"
        tree = parse_bytes(source)
        iface_node = tree.root_node.named_children[1].named_children[0].child_by_field_name("type")
        members = [
            classify_interface_member(m, source)
            for m in iface_node.named_children
        ]

        self.assertEqual(
            members,
            [
                EmbeddedIdentifier("Stringer"),
                EmbeddedSelector("io.Writer"),
                NamedMethod("Flush() error"),
            ],
        )


class TestInspectTree(unittest.TestCase):
    """Test the file-level aggregator."""

    def test_inspect_fixture(self):
        """Test the file-level aggregate of a fixture."""
        tree, source = parse_file(str(FIXTURES / "testfile1.go"))
        go_file = inspect_tree(tree, source, "testfile1.go", FuncOption.EXPORTED)

        self.assertEqual(go_file.package, "testfiles")
        self.assertEqual(go_file.imports, ["fmt", "reflect"])
        self.assertEqual([f.name for f in go_file.functions], ["ExportedFunctionOne"])
        self.assertEqual(go_file.interfaces, [])

    def test_inspect_without_package_clause(self):
        """Test that a missing package clause gives an empty name."""
        tree = parse_bytes(SCENARIO_SRC)
        go_file = inspect_tree(tree, SCENARIO_SRC)
        self.assertEqual(go_file.package, "")
        self.assertEqual(len(go_file.functions), 2)


if __name__ == "__main__":
    unittest.main()
