"""Test the virtual import and export rewriters."""

import pytest

from windyplug.transform.buffer import EditKind, TextEditBuffer
from windyplug.transform.exceptions import ParsingError
from windyplug.transform.parsers import get_javascript_parser
from windyplug.transform.registry import CapabilityRegistry
from windyplug.transform.rewriters import ExportRewriter, VirtualImportRewriter


def rewrite(code, rewriter):
    tree = get_javascript_parser().parse(code)
    edits = rewriter.rewrite(tree)
    return edits, TextEditBuffer(code).apply(edits).render()


class TestVirtualImportRewriter:
    """Test rewriting of virtual imports."""
    
    def test_named_and_aliased_imports(self):
        """Test named imports destructure from the registry property."""
        code = "import { a, b as c } from '@ns/mod';\nc(a);\n"
        _, rendered = rewrite(code, VirtualImportRewriter(prefix="@ns/"))
        
        assert rendered == (
            "// transformCode: import { a, b as c } from '@ns/mod';\n"
            "const { a, b: c } = W.mod;\n"
            "\nc(a);\n"
        )
        executable = [line for line in rendered.splitlines() if not line.startswith("//")]
        assert not any("@ns/mod" in line for line in executable)
    
    def test_empty_import_is_commented_out(self):
        """Test a side-effect import keeps its text and binds nothing."""
        code = "import '@windy/whatever';\nrun();\n"
        _, rendered = rewrite(code, VirtualImportRewriter())
        
        assert rendered == "// transformCode (empty import): import '@windy/whatever';\nrun();\n"
        assert "const" not in rendered
    
    @pytest.mark.parametrize("code", [
        "import {\n  a,\n  b as c\n} from '@windy/mod';\nc(a);\n",
        "import {\n} from '@windy/mod';\nrun();\n",
        "import def, {\n  x\n}\n  from '@windy/mod';\nx(def);\n",
    ])
    def test_multi_line_imports_are_fully_commented_out(self, code):
        """Test every line of a multi-line virtual import becomes a comment."""
        _, rendered = rewrite(code, VirtualImportRewriter())

        assert get_javascript_parser().is_valid_syntax(rendered)
        executable = [line for line in rendered.splitlines() if not line.startswith("//")]
        assert not any("@windy/" in line for line in executable)

    def test_multi_line_named_import_output(self):
        code = "import {\n  a,\n  b as c\n} from '@windy/mod';\nc(a);\n"
        _, rendered = rewrite(code, VirtualImportRewriter())

        assert rendered == (
            "// transformCode: import {\n"
            "//   a,\n"
            "//   b as c\n"
            "// } from '@windy/mod';\n"
            "const { a, b: c } = W.mod;\n"
            "\nc(a);\n"
        )

    def test_default_and_namespace_bindings_come_first(self):
        """Test standalone bindings precede the destructure statement."""
        code = "import def, { x } from '@windy/m';\nimport * as all from '@windy/n';\n"
        _, rendered = rewrite(code, VirtualImportRewriter())
        
        assert "const def = W.m;\nconst { x } = W.m;\n" in rendered
        assert "const all = W.n;\n" in rendered
        assert "const {  }" not in rendered
    
    def test_default_only_has_no_destructure(self):
        _, rendered = rewrite("import map from '@windy/map';\n", VirtualImportRewriter())
        
        assert rendered == "// transformCode: import map from '@windy/map';\nconst map = W.map;\n\n"
    
    def test_other_imports_are_untouched(self):
        code = "import x from 'lodash';\nimport { y } from './local.js';\n"
        edits, rendered = rewrite(code, VirtualImportRewriter())
        
        assert edits == []
        assert rendered == code
    
    def test_non_identifier_module_id_uses_bracket_access(self):
        _, rendered = rewrite("import { a } from '@windy/foo-bar';\n", VirtualImportRewriter())
        assert 'const { a } = W["foo-bar"];' in rendered
    
    def test_custom_runtime_global(self):
        rewriter = VirtualImportRewriter(registry=CapabilityRegistry("window.W"))
        _, rendered = rewrite("import { store } from '@windy/store';\n", rewriter)
        assert "const { store } = window.W.store;" in rendered
    
    def test_prefix_without_module_id_is_rejected(self):
        with pytest.raises(ParsingError) as exc_info:
            rewrite("import { a } from '@windy/';\n", VirtualImportRewriter())
        assert exc_info.value.line_number == 1
    
    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            VirtualImportRewriter(prefix="")
        with pytest.raises(ValueError):
            CapabilityRegistry("not valid")


class TestExportRewriter:
    """Test rewriting of the export statement."""
    
    def test_existing_export_is_replaced(self):
        """Test the export clause moves to the end with injected names first."""
        code = "const x = 1, y = 2;\nexport { x, y as z };\n"
        edits, rendered = rewrite(code, ExportRewriter(["__pluginConfig"]))
        
        assert [e.kind for e in edits] == [EditKind.REMOVE, EditKind.APPEND]
        assert rendered == (
            "const x = 1, y = 2;\n\n"
            "\n// transformCode: Export statement was modified\n"
            "export { __pluginConfig, x, y as z };\n"
        )
        assert rendered.count("export {") == 1
    
    def test_missing_export_is_added(self):
        code = "console.log(1);\n"
        edits, rendered = rewrite(code, ExportRewriter(["__pluginConfig"]))
        
        assert [e.kind for e in edits] == [EditKind.APPEND]
        assert rendered == (
            "console.log(1);\n"
            "\n// transformCode: Export statement was added\n"
            "export { __pluginConfig };\n"
        )
    
    def test_multiple_exports_are_rejected(self):
        code = "const a = 1, b = 2;\nexport { a };\nexport { b };\n"
        with pytest.raises(ParsingError) as exc_info:
            rewrite(code, ExportRewriter(["__pluginConfig"]))
        assert exc_info.value.line_number == 3
    
    @pytest.mark.parametrize("code", [
        "export const a = 1;\n",
        "export default 42;\n",
        "export * from 'lib';\n",
        "export { a } from 'lib';\n",
    ])
    def test_unsupported_shapes_are_rejected(self, code):
        with pytest.raises(ParsingError):
            rewrite(code, ExportRewriter(["__pluginConfig"]))
