from collections.abc import Callable
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

import enumgen


def _assert_config_code(exc_info: pytest.ExceptionInfo[Exception], code: str) -> None:
    err = exc_info.value
    assert getattr(err, "code") == code
    assert getattr(err, "code") in enumgen.VALID_ERROR_CODES


def test_import_enumgen_module_smoke() -> None:
    assert callable(enumgen.main)


def test_build_argument_parser_exposes_surface_and_defaults() -> None:
    parser = enumgen.build_argument_parser()
    option_actions = {
        option: action for action in parser._actions for option in action.option_strings
    }

    expected_options = {
        "--schema",
        "--output-dir",
        "--enum",
        "--list-enums",
        "--info",
        "--filter",
    }

    assert expected_options.issubset(option_actions.keys())
    assert option_actions["--schema"].default == enumgen.DEFAULT_SCHEMA
    assert option_actions["--output-dir"].default == enumgen.DEFAULT_OUTPUT_DIR
    assert option_actions["--list-enums"].default is False
    assert option_actions["--info"].default is None
    assert option_actions["--filter"].default is None


def test_parse_args_enforces_argparse_mutual_exclusion() -> None:
    with pytest.raises(SystemExit) as exc_info:
        enumgen.parse_args(["--list-enums", "--info", "Foo"])

    assert exc_info.value.code == 2


def test_parse_args_unknown_flag_exits_with_code_2() -> None:
    with pytest.raises(SystemExit) as exc_info:
        enumgen.parse_args(["--not-a-flag"])

    assert exc_info.value.code == 2


def test_parse_args_collects_repeated_and_space_separated_enums() -> None:
    args = enumgen.parse_args(["--enum", "Foo", "Bar", "--enum", "Baz"])

    assert args.enum == [["Foo", "Bar"], ["Baz"]]
    assert enumgen.normalize_enum_names(args.enum) == ("Foo", "Bar", "Baz")


def test_normalize_enum_names_none_is_empty() -> None:
    assert enumgen.normalize_enum_names(None) == ()


@pytest.mark.parametrize("raw", ["Foo", [["Foo", 3]]])
def test_normalize_enum_names_rejects_bad_types(raw: object) -> None:
    with pytest.raises(enumgen.ConfigError) as exc_info:
        enumgen.normalize_enum_names(raw)

    _assert_config_code(exc_info, "INVALID_ENUM_NAME")


def test_validate_config_generate_mode(
    make_args: Callable[..., object], existing_paths: dict[str, Path]
) -> None:
    config = enumgen.validate_config(make_args(enum=[["Foo", "Bar"]]))

    assert isinstance(config, enumgen.GenerateConfig)
    assert config.schema == existing_paths["schema"]
    assert config.output_dir == existing_paths["output_dir"]
    assert config.enums == frozenset({"Foo", "Bar"})


def test_validate_config_generate_mode_without_enums_selects_all(
    make_args: Callable[..., object],
) -> None:
    config = enumgen.validate_config(make_args())

    assert isinstance(config, enumgen.GenerateConfig)
    assert config.enums == frozenset()


def test_generate_config_is_frozen(make_args: Callable[..., object]) -> None:
    config = enumgen.validate_config(make_args())

    with pytest.raises(FrozenInstanceError):
        config.enums = frozenset({"X"})  # type: ignore[misc]


def test_validate_config_list_enums_mode(make_args: Callable[..., object]) -> None:
    config = enumgen.validate_config(make_args(list_enums=True, filter="mode"))

    assert isinstance(config, enumgen.DiscoveryConfig)
    assert config.command == "list-enums"
    assert config.filter_text == "mode"
    assert config.info_enum is None


def test_validate_config_info_mode(make_args: Callable[..., object]) -> None:
    config = enumgen.validate_config(make_args(info="ColorMode"))

    assert isinstance(config, enumgen.DiscoveryConfig)
    assert config.command == "info"
    assert config.info_enum == "ColorMode"


def test_validate_config_filter_without_list(make_args: Callable[..., object]) -> None:
    with pytest.raises(enumgen.ConfigError) as exc_info:
        enumgen.validate_config(make_args(filter="mode"))

    _assert_config_code(exc_info, "FILTER_WITHOUT_LIST")


def test_validate_config_enum_with_discovery_conflicts(
    make_args: Callable[..., object],
) -> None:
    with pytest.raises(enumgen.ConfigError) as exc_info:
        enumgen.validate_config(make_args(enum=["Foo"], list_enums=True))

    _assert_config_code(exc_info, "CONFLICT_GENERATE_DISCOVERY")


def test_validate_config_missing_schema(
    make_args: Callable[..., object], missing_path: Path
) -> None:
    with pytest.raises(enumgen.ConfigError) as exc_info:
        enumgen.validate_config(make_args(schema=missing_path))

    _assert_config_code(exc_info, "PATH_NOT_FOUND")
    assert "--schema" in exc_info.value.message


def test_validate_path_exists_rejects_none() -> None:
    with pytest.raises(enumgen.ConfigError) as exc_info:
        enumgen.validate_path_exists(None, "--schema")

    _assert_config_code(exc_info, "PATH_NOT_FOUND")


@pytest.mark.parametrize("name", ["3enums", "generated-enums", "class"])
def test_validate_config_rejects_unimportable_output_dir(
    make_args: Callable[..., object], tmp_path: Path, name: str
) -> None:
    with pytest.raises(enumgen.ConfigError) as exc_info:
        enumgen.validate_config(make_args(output_dir=tmp_path / name))

    _assert_config_code(exc_info, "INVALID_PACKAGE_NAME")


@pytest.mark.parametrize("name", ["color-mode", "for", ""])
def test_validate_enum_name_rejects_non_identifiers(name: str) -> None:
    with pytest.raises(enumgen.ConfigError) as exc_info:
        enumgen.validate_enum_name(name)

    _assert_config_code(exc_info, "INVALID_ENUM_NAME")


def test_config_error_rejects_unknown_code() -> None:
    with pytest.raises(ValueError, match="Unknown config error code"):
        enumgen.ConfigError("NOPE", "message")


def test_build_config_parses_and_validates(existing_paths: dict[str, Path]) -> None:
    config = enumgen.build_config(
        [
            "--schema",
            str(existing_paths["schema"]),
            "--output-dir",
            str(existing_paths["output_dir"]),
            "--enum",
            "Foo",
        ]
    )

    assert isinstance(config, enumgen.GenerateConfig)
    assert config.enums == frozenset({"Foo"})


def test_main_reports_config_error_and_exits_1(
    missing_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        enumgen.main(["--schema", str(missing_path)])

    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "Config error [PATH_NOT_FOUND]" in out
    assert "Hint:" in out
