"""Closed-enumeration bindings generator for Python.

Compiles enum declarations from an XML schema file into a generated Python
package. Every enum gets a parse/format/enumerate surface backed by static
token tables: canonical names, alternate aliases accepted by parse, and the
variant docs used for help text.

Usage:
    enumgen --schema enums.xml --output-dir src/app/generated_enums
    enumgen --schema enums.xml --list-enums --filter mode
    enumgen --schema enums.xml --info ColorMode
"""

import argparse
import builtins
import keyword
import re
import sys
import textwrap
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import NamedTuple

GENERATOR_NAME = "enumgen"
DEFAULT_SCHEMA = Path("enums.xml")
DEFAULT_OUTPUT_DIR = Path("generated_enums")


# ===--- CLI config contracts ---=== #


@dataclass(frozen=True)
class GenerateConfig:
    schema: Path
    output_dir: Path
    enums: frozenset[str]


@dataclass(frozen=True)
class DiscoveryConfig:
    command: str
    filter_text: str | None
    info_enum: str | None
    schema: Path


VALID_ERROR_CODES = {
    "INVALID_ENUM_NAME",
    "INVALID_PACKAGE_NAME",
    "CONFLICT_GENERATE_DISCOVERY",
    "FILTER_WITHOUT_LIST",
    "PATH_NOT_FOUND",
    "UNKNOWN_ENUM",
}


class ConfigError(Exception):
    def __init__(self, code: str, message: str, suggestion: str | None = None):
        if code not in VALID_ERROR_CODES:
            raise ValueError(f"Unknown config error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


def _is_python_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def validate_enum_name(name: str) -> str:
    if _is_python_name(name):
        return name
    raise ConfigError(
        "INVALID_ENUM_NAME",
        f"Invalid enum name: {name}",
        "Enum names are Python class names (for example ColorMode).",
    )


def validate_package_dir(path: Path) -> Path:
    if _is_python_name(path.name):
        return path
    raise ConfigError(
        "INVALID_PACKAGE_NAME",
        f"Output directory name is not an importable package name: {path.name!r}",
        "Pick a directory named like a Python package, e.g. generated_enums.",
    )


def validate_path_exists(
    path: Path | None, flag: str, suggestion: str | None = None
) -> Path:
    if path is None:
        raise ConfigError(
            "PATH_NOT_FOUND",
            f"{flag} is required: no path provided.",
            suggestion or f"Pass the path explicitly: {flag} /path/to/resource",
        )
    if path.exists():
        return path
    raise ConfigError(
        "PATH_NOT_FOUND",
        f"Path for {flag} does not exist: {path}",
        suggestion or "Provide an existing path for this flag.",
    )


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=GENERATOR_NAME,
        description="Generate parse/format bindings for closed enums",
    )

    parser.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA)
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR)
    parser.add_argument("--enum", action="append", nargs="+", default=None)

    discovery_group = parser.add_mutually_exclusive_group()
    discovery_group.add_argument("--list-enums", action="store_true", default=False)
    discovery_group.add_argument("--info", type=str, default=None)

    parser.add_argument("--filter", type=str, default=None)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_argument_parser()
    return parser.parse_args(argv)


def normalize_enum_names(raw_enums: object) -> tuple[str, ...]:
    if raw_enums is None:
        return tuple()
    if not isinstance(raw_enums, list):
        raise ConfigError(
            "INVALID_ENUM_NAME",
            f"Invalid --enum value type: {type(raw_enums).__name__}",
            "Pass enum names as --enum ColorMode.",
        )

    normalized: list[str] = []
    for entry in raw_enums:
        names = entry if isinstance(entry, list) else [entry]
        for name in names:
            if not isinstance(name, str):
                raise ConfigError(
                    "INVALID_ENUM_NAME",
                    f"Invalid enum name type: {type(name).__name__}",
                    "Pass enum names as --enum ColorMode.",
                )
            normalized.append(name)

    return tuple(normalized)


def validate_config(args: argparse.Namespace) -> GenerateConfig | DiscoveryConfig:
    raw_enums = normalize_enum_names(args.enum)
    has_discovery_command = bool(args.list_enums or args.info)

    if args.filter and not args.list_enums:
        raise ConfigError(
            "FILTER_WITHOUT_LIST",
            "--filter requires --list-enums.",
            "Add --list-enums or remove --filter.",
        )

    if raw_enums and has_discovery_command:
        raise ConfigError(
            "CONFLICT_GENERATE_DISCOVERY",
            "--enum cannot be combined with discovery flags.",
            "Choose either generate mode or one discovery command.",
        )

    schema = validate_path_exists(
        args.schema,
        "--schema",
        "Pass the declaration file explicitly: --schema /path/to/enums.xml",
    )

    if has_discovery_command:
        command = "list-enums" if args.list_enums else "info"
        info_enum = validate_enum_name(args.info) if args.info is not None else None
        return DiscoveryConfig(
            command=command,
            filter_text=args.filter,
            info_enum=info_enum,
            schema=schema,
        )

    return GenerateConfig(
        schema=schema,
        output_dir=validate_package_dir(args.output_dir),
        enums=frozenset(validate_enum_name(name) for name in raw_enums),
    )


def build_config(argv: list[str] | None = None) -> GenerateConfig | DiscoveryConfig:
    return validate_config(parse_args(argv))


# ===--- Constants ---=== #

RESERVED_MEMBER_NAMES = frozenset(
    {"parse", "variants", "descriptions", "mro", "name", "value", "classmethod"}
)
"""Member identifiers that would shadow a method or attribute of the generated
enum class, or a name its class body evaluates."""

MODULE_ERRORS: str = "errors"
RESERVED_MODULE_STEMS = frozenset({MODULE_ERRORS})

ERROR_EXPORTS: tuple[str, ...] = ("ParseError", "UnknownTokenError")

RESERVED_TYPE_NAMES = frozenset({MODULE_ERRORS, *ERROR_EXPORTS})
"""Enum type names that would collide with the generated package's own
exports. Builtin names are rejected separately."""


# ===--- Data classes ---=== #


@dataclass(frozen=True)
class VariantDecl:
    """One raw variant entry, exactly as the declaration front-end supplied it.

    Attributes:
        name: Canonical name requested for the variant.
        aliases: Requested alias strings, in declaration order. May repeat.
        doc: Free-form documentation, or None.
        member: Python identifier for the generated enum member. None means
            "same as name".
    """

    name: str
    aliases: tuple[str, ...] = ()
    doc: str | None = None
    member: str | None = None


@dataclass(frozen=True)
class EnumDecl:
    type_name: str
    variants: tuple[VariantDecl, ...]
    doc: str | None = None


@dataclass(frozen=True)
class Variant:
    name: str
    member: str
    aliases: tuple[str, ...]
    doc: str | None = None


@dataclass(frozen=True)
class Schema:
    """Validated, immutable description of one closed enumeration.

    Variant order is declaration order. It is the order enumerate() yields
    and the order of every generated table.
    """

    type_name: str
    variants: tuple[Variant, ...]
    doc: str | None = None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(v.name for v in self.variants)

    @property
    def alias_count(self) -> int:
        return sum(len(v.aliases) for v in self.variants)


# ===--- Schema extraction ---=== #

VALID_SCHEMA_ERROR_CODES = {
    "EMPTY_SCHEMA",
    "DUPLICATE_NAME",
    "DUPLICATE_ALIAS",
    "INVALID_IDENTIFIER",
    "DUPLICATE_MEMBER",
}


class SchemaError(Exception):
    """Authoring mistake in an enum declaration. Fatal to that compilation."""

    def __init__(
        self,
        code: str,
        type_name: str,
        message: str,
        suggestion: str | None = None,
    ):
        if code not in VALID_SCHEMA_ERROR_CODES:
            raise ValueError(f"Unknown schema error code: {code}")
        super().__init__(message)
        self.code = code
        self.type_name = type_name
        self.message = message
        self.suggestion = suggestion


class EmptySchemaError(SchemaError):
    def __init__(self, type_name: str):
        super().__init__(
            "EMPTY_SCHEMA",
            type_name,
            f"Enum '{type_name}' declares no variants.",
            "Declare at least one <variant> inside the <enum>.",
        )


class DuplicateNameError(SchemaError):
    def __init__(self, type_name: str, name: str, first_owner: str):
        super().__init__(
            "DUPLICATE_NAME",
            type_name,
            f"Variant name '{name}' is already claimed by variant '{first_owner}'.",
            "Rename the variant or drop the conflicting alias.",
        )
        self.name = name
        self.first_owner = first_owner


class DuplicateAliasError(SchemaError):
    def __init__(
        self, type_name: str, alias: str, first_owner: str, second_owner: str
    ):
        super().__init__(
            "DUPLICATE_ALIAS",
            type_name,
            f"Alias '{alias}' of variant '{second_owner}' is already claimed "
            f"by variant '{first_owner}'.",
            "Every name and alias must be unique across the whole enum.",
        )
        self.alias = alias
        self.first_owner = first_owner
        self.second_owner = second_owner


class InvalidIdentifierError(SchemaError):
    def __init__(
        self, type_name: str, identifier: str, owner: str | None, reason: str
    ):
        subject = f"variant '{owner}'" if owner is not None else "enum type"
        super().__init__(
            "INVALID_IDENTIFIER",
            type_name,
            f"Identifier {identifier!r} for {subject} {reason}.",
            'Give the variant a Python member name with member="..."'
            if owner is not None
            else "Rename the enum to a Python class name of its own.",
        )
        self.identifier = identifier
        self.owner = owner


class DuplicateMemberError(SchemaError):
    def __init__(
        self, type_name: str, member: str, first_owner: str, second_owner: str
    ):
        super().__init__(
            "DUPLICATE_MEMBER",
            type_name,
            f"Member identifier '{member}' of variant '{second_owner}' is "
            f"already used by variant '{first_owner}'.",
            "Pick distinct member identifiers.",
        )
        self.member = member
        self.first_owner = first_owner
        self.second_owner = second_owner


def _identifier_problem(identifier: str) -> str | None:
    if not identifier.isidentifier():
        return "is not a valid Python identifier"
    if keyword.iskeyword(identifier):
        return "is a Python keyword"
    if identifier.startswith("_"):
        return "starts with an underscore"
    return None


def extract(declaration: EnumDecl) -> Schema:
    """Validate a raw declaration and freeze it into a Schema.

    Walks variants in declaration order while accumulating every claimed
    token (canonical names and aliases) with its owning variant. The first
    violation aborts the walk; errors are never collected.

    Args:
        declaration: Raw enum declaration from a front-end.

    Returns:
        Immutable Schema with per-variant aliases deduplicated.

    Raises:
        InvalidIdentifierError: Type name or a member identifier cannot be
            used in generated Python code.
        DuplicateNameError: A canonical name collides with a claimed token.
        DuplicateAliasError: An alias collides with a claimed token,
            including its own variant's name.
        DuplicateMemberError: Two variants resolve to the same member.
        EmptySchemaError: The declaration has no variants.
    """
    type_name = declaration.type_name
    problem = _identifier_problem(type_name)
    if problem is None and type_name in RESERVED_TYPE_NAMES:
        problem = "collides with a name exported by the generated package"
    if problem is None and hasattr(builtins, type_name):
        problem = "shadows a Python builtin"
    if problem is not None:
        raise InvalidIdentifierError(type_name, type_name, None, problem)

    claimed: dict[str, str] = {}  # token -> owning canonical name
    members: dict[str, str] = {}
    variants: list[Variant] = []

    for decl in declaration.variants:
        if decl.name in claimed:
            raise DuplicateNameError(type_name, decl.name, claimed[decl.name])
        claimed[decl.name] = decl.name

        aliases = tuple(dict.fromkeys(decl.aliases))
        for alias in aliases:
            if alias in claimed:
                raise DuplicateAliasError(type_name, alias, claimed[alias], decl.name)
            claimed[alias] = decl.name

        member = decl.member if decl.member is not None else decl.name
        problem = _identifier_problem(member)
        if problem is None and member in RESERVED_MEMBER_NAMES:
            problem = "shadows an attribute of the generated enum"
        if problem is not None:
            raise InvalidIdentifierError(type_name, member, decl.name, problem)
        if member in members:
            raise DuplicateMemberError(type_name, member, members[member], decl.name)
        members[member] = decl.name

        variants.append(
            Variant(name=decl.name, member=member, aliases=aliases, doc=decl.doc)
        )

    if not variants:
        raise EmptySchemaError(type_name)

    return Schema(type_name=type_name, variants=tuple(variants), doc=declaration.doc)


def compile_schemas(declarations: list[EnumDecl]) -> list[Schema]:
    # Each declaration compiles on its own; the first SchemaError stops the run.
    return [extract(decl) for decl in declarations]


# ===--- Runtime bindings ---=== #


class ParseError(ValueError):
    """Raised when a token cannot be parsed into an enum variant."""


class UnknownTokenError(ParseError):
    """The token matches no canonical name and no alias.

    Attributes:
        input: The rejected token, verbatim.
        valid_options: Canonical names in declaration order. Aliases are
            never listed.
    """

    def __init__(self, token: str, valid_options: tuple[str, ...]):
        values = ", ".join(valid_options)
        super().__init__(f"unknown token {token!r}; valid values: {values}")
        self.input = token
        self.valid_options = tuple(valid_options)


@dataclass(frozen=True)
class TokenTable:
    """Static lookup tables derived from a Schema.

    Attributes:
        names: Canonical names in declaration order.
        tokens: Read-only map of every accepted token (canonical names, then
            aliases) to its owning canonical name.
    """

    names: tuple[str, ...]
    tokens: Mapping[str, str]


class VariantDescription(NamedTuple):
    name: str
    aliases: tuple[str, ...]
    doc: str | None


def build_token_table(schema: Schema) -> TokenTable:
    # Canonical names go in before aliases. Extraction already guarantees that
    # no token has two owners, so this order is a traversal detail and never
    # decides between variants.
    tokens: dict[str, str] = {}
    for variant in schema.variants:
        tokens[variant.name] = variant.name
    for variant in schema.variants:
        for alias in variant.aliases:
            tokens[alias] = variant.name
    return TokenTable(names=schema.names, tokens=MappingProxyType(tokens))


def describe_schema(schema: Schema) -> tuple[VariantDescription, ...]:
    return tuple(
        VariantDescription(name=v.name, aliases=v.aliases, doc=v.doc)
        for v in schema.variants
    )


class CanonicalEnum(Enum):
    """Runtime enum base whose member values are canonical names."""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EnumBindings:
    """In-process parse/format/enumerate routines for one compiled enum.

    Holds only the static tables derived from the Schema, never the Schema.
    Every method is a pure lookup, safe to call from any number of threads.
    """

    enum_type: type[CanonicalEnum]
    table: TokenTable
    descriptions: tuple[VariantDescription, ...]

    def parse(self, token: str) -> CanonicalEnum:
        """Return the variant whose canonical name or alias equals token.

        Matching is exact: no case folding and no trimming.

        Raises:
            UnknownTokenError: token matches nothing.
        """
        try:
            name = self.table.tokens[token]
        except KeyError:
            raise UnknownTokenError(token, self.table.names) from None
        return self.enum_type(name)

    def format(self, variant: CanonicalEnum) -> str:
        if not isinstance(variant, self.enum_type):
            raise TypeError(
                f"{variant!r} is not a {self.enum_type.__name__} variant"
            )
        return variant.value

    def enumerate(self) -> tuple[str, ...]:
        return self.table.names

    def describe(self) -> tuple[VariantDescription, ...]:
        return self.descriptions


def generate(schema: Schema) -> EnumBindings:
    """Build in-process bindings for a validated Schema.

    The runtime enum type is named after schema.type_name; members are named
    by their member identifier and valued by their canonical name.
    """
    enum_type = CanonicalEnum(
        schema.type_name, [(v.member, v.name) for v in schema.variants]
    )
    if schema.doc:
        enum_type.__doc__ = schema.doc
    return EnumBindings(
        enum_type=enum_type,
        table=build_token_table(schema),
        descriptions=describe_schema(schema),
    )


# ===--- Declaration loading ---=== #


class DeclarationError(Exception):
    """The schema file is well-formed XML but not a valid enum declaration."""


def _element_doc(element: ET.Element) -> str | None:
    doc = element.find("doc")
    if doc is None or doc.text is None:
        return None
    text = textwrap.dedent(doc.text).strip()
    return text or None


def load_declarations(root: ET.Element) -> list[EnumDecl]:
    """Read every <enum> under an <enums> root, in document order.

    Alias text is taken verbatim; parse matches tokens exactly, so any
    whitespace inside <alias> is part of the token.

    Raises:
        DeclarationError: Wrong root tag, missing name attributes, empty
            aliases, or an enum declared twice.
    """
    if root.tag != "enums":
        raise DeclarationError(f"Expected <enums> root element, found <{root.tag}>")

    declarations: list[EnumDecl] = []
    seen: set[str] = set()
    for enum_el in root.findall("enum"):
        type_name = enum_el.get("name")
        if not type_name:
            raise DeclarationError("<enum> element is missing its name attribute")
        if type_name in seen:
            raise DeclarationError(f"Enum '{type_name}' is declared more than once")
        seen.add(type_name)

        variants: list[VariantDecl] = []
        for variant_el in enum_el.findall("variant"):
            name = variant_el.get("name")
            if not name:
                raise DeclarationError(
                    f"<variant> in enum '{type_name}' is missing its name attribute"
                )
            aliases: list[str] = []
            for alias_el in variant_el.findall("alias"):
                if not alias_el.text:
                    raise DeclarationError(
                        f"Empty <alias> on variant '{name}' of enum '{type_name}'"
                    )
                aliases.append(alias_el.text)
            variants.append(
                VariantDecl(
                    name=name,
                    aliases=tuple(aliases),
                    doc=_element_doc(variant_el),
                    member=variant_el.get("member"),
                )
            )

        declarations.append(
            EnumDecl(
                type_name=type_name,
                variants=tuple(variants),
                doc=_element_doc(enum_el),
            )
        )

    return declarations


def load_schema_file(path: Path) -> list[EnumDecl]:
    return load_declarations(ET.parse(path).getroot())


def select_declarations(
    declarations: list[EnumDecl], names: frozenset[str]
) -> list[EnumDecl]:
    """Restrict declarations to the requested enum names, keeping file order.

    An empty selection means every declaration.

    Raises:
        ConfigError: UNKNOWN_ENUM when a requested name is not declared.
    """
    if not names:
        return list(declarations)
    declared = {decl.type_name for decl in declarations}
    unknown = sorted(names - declared)
    if unknown:
        raise ConfigError(
            "UNKNOWN_ENUM",
            f"Enum not declared in schema: {', '.join(unknown)}",
            "Run with --list-enums to see the declared enums.",
        )
    return [decl for decl in declarations if decl.type_name in names]


def to_snake_case(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", name).lower()


def module_stem_for(type_name: str) -> str:
    stem = to_snake_case(type_name)
    if keyword.iskeyword(stem) or stem in RESERVED_MODULE_STEMS:
        return stem + "_"
    return stem


def assign_module_stems(schemas: list[Schema]) -> dict[str, str]:
    """Map each enum type name to its output module stem.

    Raises:
        DeclarationError: Two enums would be written to the same module.
    """
    stems: dict[str, str] = {}
    owners: dict[str, str] = {}
    for schema in schemas:
        stem = module_stem_for(schema.type_name)
        if stem in owners:
            raise DeclarationError(
                f"Enums '{owners[stem]}' and '{schema.type_name}' both map to "
                f"module '{stem}.py'"
            )
        owners[stem] = schema.type_name
        stems[schema.type_name] = stem
    return stems


# ===--- Code emission ---=== #


def _docstring_lines(text: str, indent: str) -> list[str]:
    if '"""' in text or "\\" in text or text.endswith('"'):
        return [f"{indent}{text!r}"]
    lines = text.splitlines()
    if len(lines) == 1:
        return [f'{indent}"""{lines[0]}"""']
    out = [f'{indent}"""{lines[0]}']
    out.extend(f"{indent}{line}" if line else "" for line in lines[1:])
    out.append(f'{indent}"""')
    return out


def generate_errors_module() -> list[str]:
    lines = []
    lines.append("class ParseError(ValueError):")
    lines.append('    """Raised when a token cannot be parsed into an enum variant."""')
    lines.append("")
    lines.append("")
    lines.append("class UnknownTokenError(ParseError):")
    lines.append('    """The token matches no canonical name and no alias."""')
    lines.append("")
    lines.append(
        "    def __init__(self, token: str, valid_options: tuple[str, ...]):"
    )
    lines.append('        values = ", ".join(valid_options)')
    lines.append(
        '        super().__init__(f"unknown token {token!r}; valid values: {values}")'
    )
    lines.append("        self.input = token")
    lines.append("        self.valid_options = tuple(valid_options)")
    return lines


def generate_enum_module(schema: Schema) -> list[str]:
    """Render the source body of a self-contained module for one enum.

    The class exposes __str__ (format), parse, variants (enumerate) and
    descriptions. _missing_ lets the enum constructor accept aliases too,
    so the class works directly as an argparse type. Tables live at module
    level, after the class, in declaration order.

    The body expects the imports from enum_module_imports(): Enum,
    MappingProxyType and UnknownTokenError bound to underscore names, and
    postponed annotations, so a member or type name never shadows what the
    module itself uses.

    Args:
        schema: Validated schema.

    Returns:
        Source lines without header or imports.
    """
    name = schema.type_name
    table = build_token_table(schema)
    member_of = {v.name: v.member for v in schema.variants}
    lines = []

    lines.append(f"class {name}(_Enum):")
    if schema.doc:
        lines.extend(_docstring_lines(schema.doc, "    "))
        lines.append("")
    for variant in schema.variants:
        if variant.doc:
            for doc_line in variant.doc.splitlines():
                lines.append(f"    #: {doc_line}".rstrip())
        lines.append(f"    {variant.member} = {variant.name!r}")
    lines.append("")
    lines.append("    def __str__(self) -> str:")
    lines.append("        return self.value")
    lines.append("")
    lines.append("    @classmethod")
    lines.append(f"    def parse(cls, token: str) -> {name}:")
    lines.append("        try:")
    lines.append("            return _TOKENS[token]")
    lines.append("        except KeyError:")
    lines.append("            raise _UnknownTokenError(token, _NAMES) from None")
    lines.append("")
    lines.append("    @classmethod")
    lines.append("    def variants(cls) -> tuple[str, ...]:")
    lines.append("        return _NAMES")
    lines.append("")
    lines.append("    @classmethod")
    lines.append("    def descriptions(cls) -> tuple[tuple[str, tuple[str, ...], str | None], ...]:")
    lines.append("        return _DESCRIPTIONS")
    lines.append("")
    lines.append("    @classmethod")
    lines.append("    def _missing_(cls, value):")
    lines.append("        if isinstance(value, str):")
    lines.append("            return _TOKENS.get(value)")
    lines.append("        return None")
    lines.append("")
    lines.append("")

    lines.append("_NAMES: tuple[str, ...] = (")
    for variant in schema.variants:
        lines.append(f"    {variant.name!r},")
    lines.append(")")
    lines.append("")

    lines.append(f"_TOKENS: _MappingProxyType[str, {name}] = _MappingProxyType(")
    lines.append("    {")
    for token, owner in table.tokens.items():
        lines.append(f"        {token!r}: {name}.{member_of[owner]},")
    lines.append("    }")
    lines.append(")")
    lines.append("")

    lines.append("_DESCRIPTIONS: tuple[tuple[str, tuple[str, ...], str | None], ...] = (")
    for variant in schema.variants:
        lines.append(f"    ({variant.name!r}, {variant.aliases!r}, {variant.doc!r}),")
    lines.append(")")
    return lines


# ===--- Discovery commands ---=== #


@dataclass(frozen=True)
class EnumSummary:
    """One row of the --list-enums table.

    Counts come from the raw declaration; discovery never validates, so an
    enum that would fail extraction is still listed.

    Attributes:
        name: Enum type name.
        variant_count: Number of <variant> entries.
        alias_count: Number of <alias> entries across all variants.
        summary_line: First line of the enum doc, or "".
    """

    name: str
    variant_count: int
    alias_count: int
    summary_line: str


def gather_enum_summaries(declarations: list[EnumDecl]) -> list[EnumSummary]:
    summaries: list[EnumSummary] = []
    for decl in declarations:
        summary_line = decl.doc.splitlines()[0] if decl.doc else ""
        summaries.append(
            EnumSummary(
                name=decl.type_name,
                variant_count=len(decl.variants),
                alias_count=sum(len(v.aliases) for v in decl.variants),
                summary_line=summary_line,
            )
        )
    return summaries


def filter_enums_by_text(
    summaries: list[EnumSummary],
    filter_text: str,
) -> list[EnumSummary]:
    """Return summaries whose name contains filter_text, case-insensitively.

    Preserves input order. Empty filter_text returns all summaries.
    """
    if not filter_text:
        return list(summaries)
    needle = filter_text.lower()
    return [s for s in summaries if needle in s.name.lower()]


def find_declaration(declarations: list[EnumDecl], name: str) -> EnumDecl | None:
    for decl in declarations:
        if decl.type_name == name:
            return decl
    return None


def format_enums_table(summaries: list[EnumSummary], source_name: str) -> str:
    """Return the complete --list-enums output as a single string.

    Output format:

        2 enums in enums.xml:

          ColorMode  3 variants  3 aliases  When to colorize output.
          Foo        3 variants  2 aliases

    Args:
        summaries: Enum summaries to format (already filtered if applicable).
        source_name: Schema file name shown in the heading.

    Returns:
        Formatted multi-line string including trailing newline.
    """
    lines = [f"{len(summaries)} enums in {source_name}:", ""]

    if not summaries:
        lines.append("")
        return "\n".join(lines)

    name_width = max(len(s.name) for s in summaries)
    for s in summaries:
        variant_col = f"{s.variant_count} variants"
        alias_col = f"{s.alias_count} aliases"
        row = f"  {s.name.ljust(name_width)}  {variant_col:<11} {alias_col:<10} {s.summary_line}"
        lines.append(row.rstrip())

    lines.append("")
    return "\n".join(lines)


def format_enum_detail(decl: EnumDecl) -> str:
    """Return the complete --info output for one enum.

    Output format:

        ColorMode (3 variants)
          When to colorize output.

          Variants:
            auto
            always  aliases: yes, force
                Colorize even when not a TTY.
            never   aliases: no

    Args:
        decl: Raw declaration of the enum to display.

    Returns:
        Formatted multi-line string including trailing newline.
    """
    lines = [f"{decl.type_name} ({len(decl.variants)} variants)"]
    if decl.doc:
        lines.extend(f"  {line}".rstrip() for line in decl.doc.splitlines())

    lines.append("")
    lines.append("  Variants:")
    name_width = max((len(v.name) for v in decl.variants), default=0)
    for variant in decl.variants:
        if variant.aliases:
            aliases = ", ".join(variant.aliases)
            lines.append(f"    {variant.name.ljust(name_width)}  aliases: {aliases}")
        else:
            lines.append(f"    {variant.name}")
        if variant.doc:
            lines.extend(f"        {line}".rstrip() for line in variant.doc.splitlines())

    lines.append("")
    return "\n".join(lines)


def run_discovery(config: DiscoveryConfig) -> None:
    """Execute the discovery command specified in config.

    dispatch table:
      "list-enums" → gather_enum_summaries → [filter] → format_enums_table → print
      "info"       → find_declaration → [None check] → format_enum_detail → print

    Raises:
        SystemExit(1): When config.command == "info" and the enum is not
                       declared in the schema file.
    """
    declarations = load_schema_file(config.schema)
    source_name = config.schema.name

    if config.command == "list-enums":
        summaries = gather_enum_summaries(declarations)
        if config.filter_text is not None:
            summaries = filter_enums_by_text(summaries, config.filter_text)
        print(format_enums_table(summaries, source_name), end="")

    elif config.command == "info":
        assert config.info_enum is not None  # validate_config guarantees this
        decl = find_declaration(declarations, config.info_enum)
        if decl is None:
            print(
                f"Error: enum '{config.info_enum}' not found in {source_name}",
                file=sys.stderr,
            )
            raise SystemExit(1)
        print(format_enum_detail(decl), end="")


# ===--- Package writer ---=== #


@dataclass(frozen=True)
class WriteConfig:
    """Shared generation metadata embedded in every file preamble.

    Attributes:
        source_name: Schema file name, e.g. "enums.xml".
        enum_names: Enum type names included in this run, in document order.
    """

    source_name: str
    enum_names: tuple[str, ...]


@dataclass(frozen=True)
class ModuleImport:
    """One ``from <module> import ...`` statement in a generated file.

    A module starting with "." is a sibling inside the generated package.
    A private import binds every name under a leading underscore
    (``from enum import Enum as _Enum``), which keeps the name out of reach
    of user-chosen enum and member names.
    """

    module: str
    names: tuple[str, ...]
    private: bool = False

    @property
    def is_future(self) -> bool:
        return self.module == "__future__"

    @property
    def is_relative(self) -> bool:
        return self.module.startswith(".")


@dataclass(frozen=True)
class ModuleSpec:
    """Complete input for one generated .py module file (not __init__.py).

    Attributes:
        filename: Output filename including .py extension.
        imports: Import statements, in any order; the writer groups them.
        content_lines: Generated source lines, without header or imports.
    """

    filename: str
    imports: tuple[ModuleImport, ...]
    content_lines: tuple[str, ...]


@dataclass(frozen=True)
class InitModuleSpec:
    """Ordered re-export manifest for __init__.py.

    Every re-export is a public sibling import. Order determines import
    statement order and __all__ order.
    """

    re_exports: tuple[ModuleImport, ...]


@dataclass(frozen=True)
class FileWriteResult:
    """Result of writing a single generated file.

    Attributes:
        filename: Filename written, e.g. "color_mode.py" or "__init__.py".
        path: Absolute path of the written file.
        line_count: Number of newline characters in the written content.
        byte_count: Number of bytes written (UTF-8 encoded).
    """

    filename: str
    path: Path
    line_count: int
    byte_count: int


@dataclass(frozen=True)
class PackageWriteResult:
    output_dir: Path
    files: tuple[FileWriteResult, ...]
    removed: tuple[str, ...] = ()

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)


_HEADER_BORDER: str = "# x-------------------------------------------x #"
_GENERATED_MARKER: str = f"# | Generated by {GENERATOR_NAME}. Do not edit."


def format_file_header(config: WriteConfig) -> list[str]:
    """Return comment-block lines for a generated module file header.

    Output format:
        # x-------------------------------------------x #
        # | Enum parse/format bindings for Python
        # | Generated by enumgen. Do not edit.
        # | Source: enums.xml
        # | Enums: ColorMode, Foo
        # x-------------------------------------------x #

    The Enums line is omitted when enum_names is empty.

    Raises:
        ValueError: If config.source_name is empty.
    """
    if not config.source_name:
        raise ValueError("source_name must not be empty")

    lines: list[str] = [
        _HEADER_BORDER,
        "# | Enum parse/format bindings for Python",
        _GENERATED_MARKER,
        f"# | Source: {config.source_name}",
    ]
    if config.enum_names:
        lines.append(f"# | Enums: {', '.join(config.enum_names)}")
    lines.append(_HEADER_BORDER)
    return lines


def format_import_line(imp: ModuleImport) -> str:
    if not imp.names:
        raise ValueError(f"Import from '{imp.module}' has empty names tuple")
    if imp.private and imp.is_future:
        raise ValueError("__future__ imports cannot be private")
    if imp.private:
        names = [f"{name} as _{name}" for name in imp.names]
    else:
        names = list(imp.names)
    return f"from {imp.module} import {', '.join(names)}"


def format_import_block(imports: tuple[ModuleImport, ...]) -> list[str]:
    """Return import statement lines for a module file.

    Groups, in this order: __future__, absolute modules, sibling modules.
    Input order is kept inside a group and one blank line separates
    non-empty groups.

    Raises:
        ValueError: Propagated from format_import_line.
    """
    future: list[str] = []
    absolute: list[str] = []
    sibling: list[str] = []
    for imp in imports:
        line = format_import_line(imp)
        if imp.is_future:
            future.append(line)
        elif imp.is_relative:
            sibling.append(line)
        else:
            absolute.append(line)

    lines: list[str] = []
    for group in (future, absolute, sibling):
        if not group:
            continue
        if lines:
            lines.append("")
        lines.extend(group)
    return lines


def assemble_module_source(config: WriteConfig, spec: ModuleSpec) -> str:
    """Assemble a complete .py module source string from a ModuleSpec.

    File structure:
        <header_comment_block>
                                    <- blank line
        <import_block>              <- only when imports exist
                                    <- two blank lines
        <content_lines>
                                    <- trailing newline

    Raises:
        ValueError: If spec.filename is empty or does not end with ".py".
        ValueError: Propagated from format_import_block.
    """
    if not spec.filename or not spec.filename.endswith(".py"):
        raise ValueError(
            f"spec.filename must be non-empty and end with '.py', "
            f"got {spec.filename!r}"
        )

    parts: list[str] = list(format_file_header(config))

    if spec.imports:
        parts.append("")
        parts.extend(format_import_block(spec.imports))

    if spec.content_lines:
        parts.append("")
        parts.append("")
        parts.extend(spec.content_lines)

    return "\n".join(parts) + "\n"


def assemble_init_source(config: WriteConfig, init_spec: InitModuleSpec) -> str:
    """Assemble a complete __init__.py source string.

    File structure:
        \"\"\"<docstring>\"\"\"
                                    <- blank line
        from .<module_stem> import Name1, Name2
        ...
                                    <- blank line
        __all__ = [...]             <- every re-exported name, in order

    Raises:
        ValueError: A re-export is not a public sibling import, or two
            re-exports bind the same name.
    """
    exported: list[str] = []
    import_lines: list[str] = []
    for re_export in init_spec.re_exports:
        if not re_export.is_relative or re_export.private:
            raise ValueError(
                f"Re-export from '{re_export.module}' must be a public sibling import"
            )
        for name in re_export.names:
            if name in exported:
                raise ValueError(f"Name '{name}' is re-exported twice")
            exported.append(name)
        import_lines.append(format_import_line(re_export))

    if config.enum_names:
        subject = ", ".join(config.enum_names)
    else:
        subject = "no enums"
    docstring = (
        f'"""Parse/format bindings for {subject}. '
        f'Generated by {GENERATOR_NAME} from {config.source_name}."""'
    )
    parts: list[str] = [docstring, "", *import_lines, ""]
    parts.append("__all__ = [")
    parts.extend(f'    "{name}",' for name in exported)
    parts.append("]")

    return "\n".join(parts) + "\n"


def _write_text(output_dir: Path, filename: str, content: str) -> FileWriteResult:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    file_path = output_dir / filename
    file_path.write_text(content, encoding="utf-8")
    resolved = file_path.resolve()
    return FileWriteResult(
        filename=filename,
        path=resolved,
        line_count=content.count("\n"),
        byte_count=len(content.encode("utf-8")),
    )


def write_module(
    output_dir: Path, config: WriteConfig, spec: ModuleSpec
) -> FileWriteResult:
    """Write a single generated .py module file, creating output_dir if absent.

    Raises:
        ValueError: Propagated from assemble_module_source on invalid spec.
        OSError: Propagated directly if the filesystem write fails.
    """
    content = assemble_module_source(config, spec)
    return _write_text(output_dir, spec.filename, content)


def write_init_module(
    output_dir: Path, config: WriteConfig, init_spec: InitModuleSpec
) -> FileWriteResult:
    content = assemble_init_source(config, init_spec)
    return _write_text(output_dir, "__init__.py", content)


def is_generated_module(path: Path) -> bool:
    """True when path starts with the header this writer puts on modules."""
    try:
        with path.open(encoding="utf-8") as f:
            head = [f.readline().rstrip("\n") for _ in range(3)]
    except UnicodeDecodeError:
        return False
    return head[0] == _HEADER_BORDER and head[2] == _GENERATED_MARKER


def prune_stale_modules(output_dir: Path, keep: set[str]) -> tuple[str, ...]:
    """Delete generated modules left over from an earlier run.

    Only top-level .py files carrying the generated header are candidates,
    so hand-written files in output_dir are never touched.

    Returns:
        Removed filenames, sorted.
    """
    removed: list[str] = []
    for path in sorted(Path(output_dir).glob("*.py")):
        if path.name in keep or not is_generated_module(path):
            continue
        path.unlink()
        removed.append(path.name)
    return tuple(removed)


def write_package(
    output_dir: Path,
    config: WriteConfig,
    module_specs: tuple[ModuleSpec, ...],
    init_spec: InitModuleSpec,
) -> PackageWriteResult:
    """Write all module files and __init__.py for a complete package.

    Writes module specs first in provided order, then __init__.py, then
    removes generated modules this run no longer produces (an enum dropped
    from the schema must not stay importable). Any OSError propagates
    immediately; partial writes are not rolled back.

    Returns:
        PackageWriteResult with module results first, init result last.
    """
    files: list[FileWriteResult] = []
    for spec in module_specs:
        files.append(write_module(output_dir, config, spec))
    files.append(write_init_module(output_dir, config, init_spec))
    removed = prune_stale_modules(output_dir, {f.filename for f in files})
    return PackageWriteResult(
        output_dir=Path(output_dir),
        files=tuple(files),
        removed=removed,
    )


# ===--- Pipeline ---=== #


def build_write_config(config: GenerateConfig, schemas: list[Schema]) -> WriteConfig:
    return WriteConfig(
        source_name=config.schema.name,
        enum_names=tuple(s.type_name for s in schemas),
    )


def enum_module_imports() -> tuple[ModuleImport, ...]:
    return (
        ModuleImport("__future__", ("annotations",)),
        ModuleImport("enum", ("Enum",), private=True),
        ModuleImport("types", ("MappingProxyType",), private=True),
        ModuleImport(f".{MODULE_ERRORS}", ("UnknownTokenError",), private=True),
    )


def build_module_specs(
    schemas: list[Schema], stems: dict[str, str]
) -> tuple[ModuleSpec, ...]:
    """Assemble the errors module spec followed by one spec per enum.

    Enum modules follow document order and share enum_module_imports().
    """
    specs: list[ModuleSpec] = [
        ModuleSpec(
            filename=f"{MODULE_ERRORS}.py",
            imports=(),
            content_lines=tuple(generate_errors_module()),
        )
    ]
    for schema in schemas:
        specs.append(
            ModuleSpec(
                filename=f"{stems[schema.type_name]}.py",
                imports=enum_module_imports(),
                content_lines=tuple(generate_enum_module(schema)),
            )
        )
    return tuple(specs)


def build_init_spec(schemas: list[Schema], stems: dict[str, str]) -> InitModuleSpec:
    re_exports = [ModuleImport(f".{MODULE_ERRORS}", ERROR_EXPORTS)]
    for schema in schemas:
        re_exports.append(
            ModuleImport(f".{stems[schema.type_name]}", (schema.type_name,))
        )
    return InitModuleSpec(re_exports=tuple(re_exports))


def run_generate(config: GenerateConfig) -> PackageWriteResult:
    """Execute the complete generation pipeline for a GenerateConfig.

    Stages: parse -> load declarations -> select -> extract -> assign
    modules -> assemble -> write -> summarize.

    Raises:
        OSError: Schema file not readable or filesystem write failure.
        ET.ParseError: Malformed schema XML.
        DeclarationError: Schema XML does not describe valid declarations.
        ConfigError: UNKNOWN_ENUM for a --enum name not in the file.
        SchemaError: First invalid enum declaration.
    """
    print(f"Parsing: {config.schema}")
    declarations = load_schema_file(config.schema)
    print(f"  Declarations: {len(declarations)} enums")

    selected = select_declarations(declarations, config.enums)
    schemas = compile_schemas(selected)
    variant_count = sum(len(s.variants) for s in schemas)
    alias_count = sum(s.alias_count for s in schemas)
    print(
        f"  Compiled: {len(schemas)} enums, {variant_count} variants, "
        f"{alias_count} aliases"
    )

    stems = assign_module_stems(schemas)
    write_config = build_write_config(config, schemas)
    module_specs = build_module_specs(schemas, stems)
    init_spec = build_init_spec(schemas, stems)

    result = write_package(config.output_dir, write_config, module_specs, init_spec)
    print(
        f"  Written: {len(result.files)} files, "
        f"{result.total_lines} lines to {result.output_dir}"
    )
    if result.removed:
        print(f"  Removed stale: {', '.join(result.removed)}")

    print_generation_summary(build_generation_summary(write_config, schemas, result))
    return result


# ===--- Summary report ---=== #


@dataclass(frozen=True)
class GenerationSummary:
    """Complete, immutable data for the post-generation console report.

    Attributes:
        source_label: Schema file name.
        output_dir: Output directory path as string.
        package_name: Importable package name (the output directory name).
        enum_count: Number of enums compiled.
        variant_count: Total variants across all enums.
        alias_count: Total aliases across all enums.
        files: Ordered write results from PackageWriteResult.files.
    """

    source_label: str
    output_dir: str
    package_name: str
    enum_count: int
    variant_count: int
    alias_count: int
    files: tuple[FileWriteResult, ...]


def build_generation_summary(
    write_config: WriteConfig,
    schemas: list[Schema],
    write_result: PackageWriteResult,
) -> GenerationSummary:
    return GenerationSummary(
        source_label=write_config.source_name,
        output_dir=str(write_result.output_dir),
        package_name=Path(write_result.output_dir).name,
        enum_count=len(schemas),
        variant_count=sum(len(s.variants) for s in schemas),
        alias_count=sum(s.alias_count for s in schemas),
        files=write_result.files,
    )


def format_generation_summary(summary: GenerationSummary) -> str:
    """Render a GenerationSummary to the multi-section console string.

    Line counts use thousands separators. Returns a string with exactly one
    trailing newline.
    """
    lines: list[str] = []
    lines.append("Enum bindings generated:")
    lines.append("")
    lines.append(f"  Source:     {summary.source_label}")
    lines.append(f"  Output:     {summary.output_dir}")
    lines.append(f"  Package:    {summary.package_name}")
    lines.append("")
    lines.append(f"  Enums:      {summary.enum_count:>6}")
    lines.append(f"  Variants:   {summary.variant_count:>6}")
    lines.append(f"  Aliases:    {summary.alias_count:>6}")
    lines.append("")
    lines.append("  Files written:")
    for file_result in summary.files:
        line_str = f"{file_result.line_count:>6,} lines"
        lines.append(f"    {file_result.filename:<28} {line_str}")

    total_lines = sum(f.line_count for f in summary.files)
    lines.append("")
    lines.append(f"  Total: {total_lines:,} lines across {len(summary.files)} files")
    lines.append("")

    return "\n".join(lines)


def print_generation_summary(summary: GenerationSummary) -> None:
    print(format_generation_summary(summary), end="")


# ===--- Main generation ---=== #


def _exit_with_config_error(err: ConfigError) -> None:
    print(f"Config error [{err.code}]: {err.message}")
    if err.suggestion:
        print(f"Hint: {err.suggestion}")
    raise SystemExit(1) from err


def main(argv: list[str] | None = None):
    try:
        config = build_config(argv)
    except ConfigError as err:
        _exit_with_config_error(err)

    try:
        if isinstance(config, DiscoveryConfig):
            run_discovery(config)
        else:
            run_generate(config)
    except ConfigError as err:
        _exit_with_config_error(err)
    except SchemaError as err:
        print(f"Schema error [{err.code}] in {err.type_name}: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err
    except (OSError, ET.ParseError, DeclarationError) as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err
    except ValueError as err:
        print(f"Internal error: {err}")
        raise SystemExit(1) from err


if __name__ == "__main__":
    main()
