"""Tests for class, parameter and import searches in a document."""

from __future__ import annotations

import pytest

from paramhint.inference.search import (
    class_with_same_name,
    find_import,
    find_param,
    hint_of_similar_param,
    is_imported,
    is_valid_name,
    looks_like_a_class,
)


class TestIsValidName:
    @pytest.mark.parametrize("name", ["a", "_private", "pkg.mod", "größe"])
    def test_valid(self, name: str) -> None:
        assert is_valid_name(name) is True

    @pytest.mark.parametrize("name", ["", "1a", "a..b", "a b", "a-b", "a("])
    def test_invalid(self, name: str) -> None:
        assert is_valid_name(name) is False


class TestClassWithSameName:
    def test_case_insensitive_by_default(self) -> None:
        assert class_with_same_name("test", "class Test:\n") == "Test"

    def test_class_with_bases(self) -> None:
        text = "class Test(Base):\n    pass\n"
        assert class_with_same_name("test", text) == "Test"

    def test_case_sensitive(self) -> None:
        text = "class Test:\n"
        assert class_with_same_name("test", text, ignore_case=False) is None
        assert class_with_same_name("Test", text, ignore_case=False) == "Test"

    def test_prefix_of_other_class(self) -> None:
        assert class_with_same_name("test", "class Testing:\n") is None

    def test_commented_class(self) -> None:
        assert class_with_same_name("test", "# class Test:\n") is None


class TestHintOfSimilarParam:
    def test_single_param(self) -> None:
        text = "def func(test: str):\n    pass\n"
        assert hint_of_similar_param("test", text) == "str"

    def test_preceding_params(self) -> None:
        text = "def func(self, a, test: int):\n"
        assert hint_of_similar_param("test", text) == "int"

    def test_trailing_params(self) -> None:
        text = "def func(test: float, b, c=1):\n"
        assert hint_of_similar_param("test", text) == "float"

    def test_default_value_is_excluded(self) -> None:
        text = "def func(test: str='x'):\n"
        assert hint_of_similar_param("test", text) == "str"

    def test_line_breaks_in_signature(self) -> None:
        text = "def func(\n    a,\n    test: pathlib.Path,\n):\n"
        assert hint_of_similar_param("test", text) == "pathlib.Path"

    def test_async_def(self) -> None:
        text = "async def func(test: bytes):\n"
        assert hint_of_similar_param("test", text) == "bytes"

    def test_non_ascii_function_name(self) -> None:
        text = "def größe(test: int):\n"
        assert hint_of_similar_param("test", text) == "int"

    def test_no_substring_match(self) -> None:
        text = "def func(my_test: int, tests: str):\n"
        assert hint_of_similar_param("test", text) is None

    def test_double_colon(self) -> None:
        assert hint_of_similar_param("test", "def func(test:: int):\n") is None

    def test_commented_out_param(self) -> None:
        text = "def func(a,  # test: int\n         b):\n"
        assert hint_of_similar_param("test", text) is None

    def test_trailing_comment_on_earlier_line(self) -> None:
        text = "def func(\n    a,  # first (x)\n    test: int,\n):\n"
        assert hint_of_similar_param("test", text) == "int"

    def test_commented_out_line_in_signature(self) -> None:
        text = "def func(\n    a,\n    # test: str,\n    test: int,\n):\n"
        assert hint_of_similar_param("test", text) == "int"

    def test_commented_out_def(self) -> None:
        assert hint_of_similar_param("test", "# def func(test: int):\n") is None

    def test_unhinted_param(self) -> None:
        assert hint_of_similar_param("test", "def func(test):\n") is None

    def test_dotted_param(self) -> None:
        assert hint_of_similar_param("a.b", "def func(a.b: int):\n") is None


class TestFindImport:
    def test_from_import(self) -> None:
        text = "from pathlib import Path\n"
        assert find_import("Path", text) == "Path"

    def test_from_import_of_several_names(self) -> None:
        text = "from pathlib import PurePath, Path\n"
        assert find_import("Path", text) == "Path"

    def test_not_imported(self) -> None:
        assert find_import("Path", "import os\n") is None

    def test_module_import_keeps_dotted_name(self) -> None:
        text = "import pathlib\n"
        assert find_import("pathlib.Path", text) == "pathlib.Path"

    def test_dotted_name_from_imported_type(self) -> None:
        text = "from pathlib import Path\n"
        assert find_import("pathlib.Path", text) == "Path"

    def test_dotted_module_import(self) -> None:
        text = "import os.path\n"
        assert find_import("os.path.Thing", text) == "os.path.Thing"

    def test_imported_submodule(self) -> None:
        text = "from pkg import mod\n"
        assert find_import("mod.Type", text) == "mod.Type"

    def test_aliased_import(self) -> None:
        text = "import numpy as np\n"
        assert find_import("np", text) == "np"
        assert find_import("np", text, check_as_imports=False) is None

    def test_alias_hides_original_name(self) -> None:
        text = "from pathlib import Path as P\n"
        assert find_import("Path", text) is None

    def test_invalid_name(self) -> None:
        assert find_import("not valid", "import os\n") is None


class TestIsImported:
    def test_plain_import(self) -> None:
        assert is_imported("os", "import os\n") is True

    def test_import_of_longer_name(self) -> None:
        assert is_imported("os", "import ossaudiodev\n") is False

    def test_parenthesised_from_import(self) -> None:
        assert is_imported("Path", "from pathlib import (Path)\n") is True


class TestLooksLikeAClass:
    @pytest.mark.parametrize("name", ["Foo", "pkg.Foo", "a.b.Foo"])
    def test_titlecase(self, name: str) -> None:
        assert looks_like_a_class(name) is True

    @pytest.mark.parametrize("name", ["foo", "cls.make", "_Foo"])
    def test_lowercase(self, name: str) -> None:
        assert looks_like_a_class(name) is False


class TestFindParam:
    def test_param_before_colon(self) -> None:
        line = "def f(self, value:"
        assert find_param(line, len(line)) == "value"

    def test_first_param(self) -> None:
        line = "def f(value:"
        assert find_param(line, len(line)) == "value"

    def test_cursor_inside_line(self) -> None:
        line = "def f(a: int, value: str):"
        assert find_param(line, len("def f(a: int, value:")) == "value"

    def test_not_a_signature(self) -> None:
        line = "value:"
        assert find_param(line, len(line)) is None

    def test_invalid_param(self) -> None:
        line = "def f(a, 1bad:"
        assert find_param(line, len(line)) is None
