import pytest

from memo_engine.config import DEFAULT_DOCUMENT, EXPORT_FILENAME, EditorConfig


def test_defaults() -> None:
    config = EditorConfig()

    assert config.storage_key == "markdown-memo-content"
    assert config.export_filename == EXPORT_FILENAME == "memo.md"
    assert config.indent_unit == "  "
    assert config.default_document == DEFAULT_DOCUMENT
    assert DEFAULT_DOCUMENT.startswith("# Markdown Memo\n")


def test_from_env_overrides() -> None:
    config = EditorConfig.from_env(
        {
            "MEMO_ENGINE_EXPORT_FILENAME": "notes.md",
            "MEMO_ENGINE_INDENT_WIDTH": "4",
            "MEMO_ENGINE_EXPORT_DIR": "/tmp/out",
            "UNRELATED": "ignored",
        }
    )

    assert config.export_filename == "notes.md"
    assert config.indent_unit == "    "
    assert config.export_dir == "/tmp/out"
    assert config.storage_key == "markdown-memo-content"


def test_from_env_empty_mapping_gives_defaults() -> None:
    assert EditorConfig.from_env({}) == EditorConfig()


@pytest.mark.parametrize(
    "kwargs",
    [{"storage_key": ""}, {"export_filename": ""}, {"indent_unit": "\t"}],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        EditorConfig(**kwargs)


def test_zero_indent_width_rejected() -> None:
    with pytest.raises(ValueError):
        EditorConfig.from_env({"MEMO_ENGINE_INDENT_WIDTH": "0"})
