"""Guards on how src/chat_settings imports itself.

1. No function-level `import chat_settings.*`: it shadows the module-level
   `chat_settings` binding for the whole enclosing function, so any earlier
   `chat_settings.` reference raises UnboundLocalError.
2. One-way layering: core/, app/, io/ and services/ never import tui/ or
   textual. Controllers stay testable without a running app.

This file is named with `test_0_` so it runs first.
"""

import ast
import os

_SRC_ROOT = os.path.join(os.path.dirname(__file__), "..", "src", "chat_settings")

_HEADLESS_DIRS = ("core", "app", "io", "services")


def _parsed_modules():
    for dirpath, _dirs, files in os.walk(_SRC_ROOT):
        for fname in files:
            if not fname.endswith(".py"):
                continue
            path = os.path.join(dirpath, fname)
            with open(path, encoding="utf-8") as f:
                tree = ast.parse(f.read(), filename=path)
            yield os.path.relpath(path, _SRC_ROOT), tree


def _imported_names(node):
    if isinstance(node, ast.Import):
        return [alias.name for alias in node.names]
    if isinstance(node, ast.ImportFrom) and node.module:
        return [node.module]
    return []


def _find_function_level_imports():
    violations = []
    for rel, tree in _parsed_modules():
        for node in ast.walk(tree):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            for child in ast.walk(node):
                if not isinstance(child, ast.Import):
                    continue
                for alias in child.names:
                    if alias.name.startswith("chat_settings"):
                        violations.append(f"{rel}:{child.lineno} function-level `import {alias.name}`")
    return violations


def _find_upward_imports():
    violations = []
    for rel, tree in _parsed_modules():
        if rel.split(os.sep)[0] not in _HEADLESS_DIRS:
            continue
        for node in ast.walk(tree):
            for name in _imported_names(node):
                if name.startswith(("chat_settings.tui", "textual")):
                    violations.append(f"{rel}:{node.lineno} imports {name}")
    return violations


def test_no_function_level_chat_settings_imports():
    violations = _find_function_level_imports()
    assert violations == [], (
        "Function-level `import chat_settings.*` shadows the module binding and "
        "causes UnboundLocalError. Move these to module level:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_headless_layers_do_not_import_ui():
    violations = _find_upward_imports()
    assert violations == [], "UI imports in headless modules:\n" + "\n".join(
        f"  {v}" for v in violations
    )
