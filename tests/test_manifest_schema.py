"""Tests for filelist parsing."""
import pytest

from fv_patcher.core.errors import CacheError, ManifestParseError
from fv_patcher.manifest import FileEntry, ManifestDocument

from conftest import PREFIX, filelist_yaml


def test_parse_wire_format():
    """Test: capitalised wire keys map onto the model.

    Given: a filelist with one delete and one download
    When: it is parsed
    Then: every field is populated and order is preserved
    """
    text = filelist_yaml(
        deletes=[{"Name": "old.dat"}],
        downloads=[
            {"Name": "spells_us.txt", "MD5": "0123456789ABCDEF0123456789ABCDEF", "Date": "20240501", "Size": 1024},
            {"Name": "Resources/map.txt", "MD5": "ffffffffffffffffffffffffffffffff"},
        ],
    )

    document = ManifestDocument.from_yaml(text)

    assert document.version == "2024-05-01"
    assert document.download_prefix == PREFIX
    assert [e.name for e in document.deletes] == ["old.dat"]
    assert [e.name for e in document.downloads] == ["spells_us.txt", "Resources/map.txt"]
    first = document.downloads[0]
    assert first.md5 == "0123456789abcdef0123456789abcdef"
    assert first.date == "20240501"
    assert first.size == 1024
    assert document.downloads[1].size == 0


def test_url_for_concatenates_prefix_and_name():
    document = ManifestDocument.from_yaml(
        filelist_yaml(downloads=[{"Name": "Resources/map.txt", "MD5": "aa"}])
    )

    assert document.url_for(document.downloads[0]) == PREFIX + "Resources/map.txt"


def test_download_without_md5_is_rejected():
    """Download entries must carry a checksum."""
    with pytest.raises(ManifestParseError):
        ManifestDocument.from_yaml(filelist_yaml(downloads=[{"Name": "a.txt"}]))


def test_delete_without_md5_is_allowed():
    document = ManifestDocument.from_yaml(filelist_yaml(deletes=[{"Name": "gone.txt"}]))
    assert document.deletes[0].md5 == ""


def test_malformed_yaml_raises_parse_error():
    with pytest.raises(ManifestParseError):
        ManifestDocument.from_yaml(b"Version: [unclosed\n")


def test_non_mapping_document_raises_parse_error():
    with pytest.raises(ManifestParseError):
        ManifestDocument.from_yaml(b"- just\n- a list\n")


def test_empty_document_has_no_entries():
    document = ManifestDocument.from_yaml(b"")
    assert document.deletes == []
    assert document.downloads == []


def test_null_sections_treated_as_empty():
    document = ManifestDocument.from_yaml(b"Version: 3\nDeletes:\nDownloads:\n")
    assert document.version == "3"
    assert document.deletes == []
    assert document.downloads == []


def test_manifest_is_immutable():
    """Frozen model rejects attribute assignment."""
    from pydantic import ValidationError

    document = ManifestDocument.from_yaml(filelist_yaml())
    with pytest.raises(ValidationError):
        document.version = "other"


def test_file_entry_accepts_python_names():
    entry = FileEntry(name="a.txt", md5="AB")
    assert entry.md5 == "ab"


def test_load_missing_file_raises_cache_error(tmp_path):
    with pytest.raises(CacheError):
        ManifestDocument.load(tmp_path / "missing.yml")


def test_numeric_names_are_kept_as_text():
    """Unquoted numeric names load as text rather than failing the whole filelist."""
    document = ManifestDocument.from_yaml(
        b"Version: 1\nDeletes:\n  - Name: 1234\nDownloads:\n  - Name: 5678\n    MD5: aa\n"
    )

    assert document.deletes[0].name == "1234"
    assert document.downloads[0].name == "5678"
