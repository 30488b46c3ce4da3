"""Tests for ExpressionCompiler and identity derivation."""

from __future__ import annotations

from pathlib import Path

import pytest

from csimplegen.compiler import ExpressionCompiler, derive_identity, number_sites
from csimplegen.models import (
    SYNTHETIC_OWNER,
    CompilerConfiguration,
    Dialect,
    ExtractionSite,
    UsageKind,
)


def _site(
    script: str,
    kind: UsageKind = UsageKind.PREDICATE,
    owner: str | None = "com.example.MyRoutes",
    origin: str = "MyRoutes.java",
) -> ExtractionSite:
    dialect = Dialect.CODE if owner else Dialect.DOCUMENT
    return ExtractionSite(script=script, kind=kind, owner=owner, origin=Path(origin), dialect=dialect)


def test_derive_identity_uses_owner_and_sequence() -> None:
    assert derive_identity(_site("${body}"), 1) == "com.example.MyRoutes$$Csimple1"
    assert derive_identity(_site("${body}", owner=None), 3) == f"{SYNTHETIC_OWNER}$$Csimple3"


def test_derive_identity_rejects_invalid_input() -> None:
    with pytest.raises(ValueError):
        derive_identity(_site("${body}"), 0)
    with pytest.raises(ValueError):
        derive_identity(_site("${body}", owner="com..Broken"), 1)


def test_number_sites_counts_per_owner() -> None:
    sites = [
        _site("${body}", owner="a.A"),
        _site("${body}", owner="b.B"),
        _site("${body}", owner="a.A"),
        _site("${body}", owner=None),
    ]

    assert [sequence for _, sequence in number_sites(sites)] == [1, 1, 2, 1]


def test_compile_predicate_unit() -> None:
    outcome = ExpressionCompiler().compile(_site("${header.age} > 18"))

    assert outcome.ok
    unit = outcome.unit
    assert unit is not None
    assert unit.identity == "com.example.MyRoutes$$Csimple1"
    assert unit.kind is UsageKind.PREDICATE
    assert unit.relative_path == Path("com/example/MyRoutes$$Csimple1.java")
    assert unit.source.startswith("package com.example;\n\nimport java.util.*;\n")
    assert "import static org.apache.camel.language.csimple.CSimpleHelper.*;\n" in unit.source
    assert " * Generated by camel build tools - do NOT edit this file!\n" in unit.source
    assert "public class MyRoutes$$Csimple1 extends org.apache.camel.language.csimple.CSimpleSupport {" in unit.source
    assert "        return true;\n" in unit.source
    assert '        return "${header.age} > 18";\n' in unit.source
    assert "public boolean matches(" in unit.source
    assert "public Object evaluate(" not in unit.source
    assert unit.source.endswith("}\n")


def test_compile_value_unit() -> None:
    outcome = ExpressionCompiler().compile(_site("Hello ${body}", kind=UsageKind.VALUE), 2)

    assert outcome.unit is not None
    source = outcome.unit.source
    assert outcome.unit.identity == "com.example.MyRoutes$$Csimple2"
    assert "public Object evaluate(" in source
    assert 'return "Hello " + body;' in source
    assert "        return false;\n" in source
    assert "public boolean matches(" not in source


def test_compile_is_deterministic() -> None:
    site = _site("${header.kind} == 'gold'")

    first = ExpressionCompiler().compile(site, 4)
    second = ExpressionCompiler().compile(site, 4)

    assert first.unit is not None and second.unit is not None
    assert first.unit.source == second.unit.source


def test_compile_injects_configured_imports() -> None:
    configuration = CompilerConfiguration.create(
        ("import com.example.Order;", "import com.example.Customer;")
    )

    outcome = ExpressionCompiler(configuration).compile(_site("${bodyAs(Order).getCustomer()}", kind=UsageKind.VALUE))

    assert outcome.unit is not None
    assert (
        "import static org.apache.camel.language.csimple.CSimpleHelper.*;\n"
        "\n"
        "import com.example.Customer;\n"
        "import com.example.Order;\n"
        "\n"
        "/**\n"
    ) in outcome.unit.source


def test_expand_aliases_is_single_pass_and_longest_first() -> None:
    configuration = CompilerConfiguration.create(
        aliases={"cust": "${header.cust}", "customer": "${header.customer}", "header": "HEADER"}
    )
    compiler = ExpressionCompiler(configuration)

    assert compiler.expand_aliases("customer cust header") == "${header.customer} ${header.cust} HEADER"
    assert compiler.expand_aliases("customers") == "customers"


def test_expand_aliases_without_configuration() -> None:
    assert ExpressionCompiler().expand_aliases("${body}") == "${body}"


def test_compile_applies_aliases_before_parsing() -> None:
    configuration = CompilerConfiguration.create(aliases={"adult": "${header.age} >= 18"})

    outcome = ExpressionCompiler(configuration).compile(_site("adult"))

    assert outcome.unit is not None
    assert 'isGreaterThanOrEqualTo(exchange, header(message, "age"), 18)' in outcome.unit.source
    assert 'return "${header.age} >= 18";' in outcome.unit.source


def test_compile_malformed_script_returns_fatal() -> None:
    site = _site("${header.age > 18", origin="Broken.java")

    outcome = ExpressionCompiler().compile(site)

    assert not outcome.ok
    assert outcome.unit is None
    assert outcome.error is not None
    assert outcome.error.site is site
    assert "Unclosed function" in outcome.error.reason
    assert outcome.error.describe().startswith("Cannot compile csimple script '${header.age > 18' from Broken.java")


def test_compile_all_stops_at_first_error() -> None:
    sites = [_site("${body} == 1"), _site("${body} =="), _site("${body} == 2")]

    outcomes = ExpressionCompiler().compile_all(sites)

    assert len(outcomes) == 2
    assert outcomes[0].ok
    assert outcomes[1].error is not None


def test_derive_identity_accepts_unicode_java_names() -> None:
    site = _site("${body}", owner="com.exämple.ÜberRoutes")

    assert derive_identity(site, 1) == "com.exämple.ÜberRoutes$$Csimple1"


def test_compile_unusable_owner_returns_fatal() -> None:
    site = _site("${body} == 1", owner="com.example.9Routes")

    outcome = ExpressionCompiler().compile(site)

    assert outcome.unit is None
    assert outcome.error is not None
    assert "not a valid qualified name" in outcome.error.reason
