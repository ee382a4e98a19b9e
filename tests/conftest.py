import argparse
import sys
import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path

import pytest

GENERATOR_DIR = Path(__file__).resolve().parent.parent
if str(GENERATOR_DIR) not in sys.path:
    sys.path.insert(0, str(GENERATOR_DIR))

import enumgen  # noqa: E402


@pytest.fixture
def existing_paths(tmp_path: Path) -> dict[str, Path]:
    schema = tmp_path / "enums.xml"
    schema.write_text("<enums />\n", encoding="utf-8")

    output_dir = tmp_path / "generated_enums"
    return {
        "schema": schema,
        "output_dir": output_dir,
    }


@pytest.fixture
def missing_path(tmp_path: Path) -> Path:
    return tmp_path / "missing"


@pytest.fixture
def make_args(existing_paths: dict[str, Path]) -> Callable[..., argparse.Namespace]:
    def _make_args(**overrides: object) -> argparse.Namespace:
        base_args: dict[str, object] = {
            "schema": existing_paths["schema"],
            "output_dir": existing_paths["output_dir"],
            "enum": None,
            "list_enums": False,
            "info": None,
            "filter": None,
        }
        base_args.update(overrides)
        return argparse.Namespace(**base_args)

    return _make_args


@pytest.fixture
def make_schema_root() -> Callable[[str], ET.Element]:
    def _make_schema_root(inner_xml: str) -> ET.Element:
        return ET.fromstring(f"<enums>{inner_xml}</enums>")

    return _make_schema_root


@pytest.fixture
def make_variant() -> Callable[..., enumgen.VariantDecl]:
    def _make_variant(
        name: str,
        *aliases: str,
        doc: str | None = None,
        member: str | None = None,
    ) -> enumgen.VariantDecl:
        return enumgen.VariantDecl(
            name=name, aliases=tuple(aliases), doc=doc, member=member
        )

    return _make_variant


@pytest.fixture
def foo_decl(make_variant: Callable[..., enumgen.VariantDecl]) -> enumgen.EnumDecl:
    return enumgen.EnumDecl(
        type_name="Foo",
        variants=(
            make_variant("Unk"),
            make_variant("On", "Up", doc="Powered."),
            make_variant("Off", "Down"),
        ),
        doc="Power state.",
    )


@pytest.fixture
def foo_schema(foo_decl: enumgen.EnumDecl) -> enumgen.Schema:
    return enumgen.extract(foo_decl)


@pytest.fixture
def fixture_schema_path() -> Path:
    return GENERATOR_DIR / "tests" / "fixtures" / "enums_minimal.xml"
