from __future__ import annotations

from pathlib import Path

import pytest

from csimplegen.compiler import load_compiler_configuration
from csimplegen.config import ConfigError


def test_missing_file_yields_empty_configuration(tmp_path: Path) -> None:
    configuration = load_compiler_configuration(tmp_path / "camel-csimple.properties")

    assert configuration.is_empty
    assert configuration.imports == ()
    assert dict(configuration.aliases) == {}


def test_parses_imports_and_aliases(tmp_path: Path) -> None:
    config_path = tmp_path / "camel-csimple.properties"
    config_path.write_text(
        "\n".join(
            [
                "# imports for generated classes",
                "  import com.example.Order;  ",
                "import com.example.Customer;",
                "import com.example.Order;",
                "",
                "order = bodyAs(Order)",
                "vip=${header.vip} == true",
                "vip=${header.gold} == true",
                "this line is ignored",
                "=no key",
                "no value=",
                "# skipped=value",
            ]
        ),
        encoding="utf-8",
    )

    configuration = load_compiler_configuration(config_path)

    assert configuration.imports == ("import com.example.Customer;", "import com.example.Order;")
    assert dict(configuration.aliases) == {
        "order": "bodyAs(Order)",
        "vip": "${header.gold} == true",
    }
    assert not configuration.is_empty


def test_alias_value_keeps_later_equals_signs(tmp_path: Path) -> None:
    config_path = tmp_path / "camel-csimple.properties"
    config_path.write_text("same=${body} == 'a=b'\n", encoding="utf-8")

    configuration = load_compiler_configuration(config_path)

    assert configuration.aliases["same"] == "${body} == 'a=b'"


def test_unreadable_file_raises_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "camel-csimple.properties"
    config_path.mkdir()

    with pytest.raises(ConfigError, match="Cannot load"):
        load_compiler_configuration(config_path)
