"""Tests for logical path encoding and decoding."""

import pytest

from overlay.exceptions import InvalidPathError, ParseError
from overlay.path_codec import PathCodec, is_absolute, is_under_prefix


@pytest.fixture
def codec():
    return PathCodec("tachyon://h:19998", staging_prefix="/tmp/staging")


class TestDecode:
    """Tests for PathCodec.decode."""

    def test_bare_path_without_suffix(self, codec):
        assert codec.decode("/data/a.csv") == ("/data/a.csv", None)

    def test_bare_path_with_suffix(self, codec):
        assert codec.decode("/data/a.csv%42") == ("/data/a.csv", 42)

    def test_full_uri_with_suffix(self, codec):
        assert codec.decode("tachyon://h:19998/data/a.csv%7") == ("/data/a.csv", 7)

    def test_uri_without_path_is_root(self, codec):
        assert codec.decode("tachyon://h:19998") == ("/", None)

    def test_zero_entry_id_is_valid(self, codec):
        assert codec.decode("/data/a.csv%0") == ("/data/a.csv", 0)

    @pytest.mark.parametrize("path", [
        "/data/a.csv%abc",
        "/data/a.csv%",
        "/data/a.csv%-1",
        "/data/a.csv%4%2",
        "/data/a.csv%1.5",
    ])
    def test_malformed_suffix_raises_parse_error(self, codec, path):
        with pytest.raises(ParseError):
            codec.decode(path)


class TestParse:
    """Tests for PathCodec.parse."""

    def test_parse_full_uri(self, codec):
        logical = codec.parse("tachyon://h:19998/data/a.csv%42")

        assert logical.scheme == "tachyon"
        assert logical.host == "h"
        assert logical.port == 19998
        assert logical.raw_path == "/data/a.csv"
        assert logical.entry_id == 42
        assert logical.has_entry

    def test_parse_bare_path(self, codec):
        logical = codec.parse("/data/a.csv")

        assert logical.scheme == ""
        assert logical.port is None
        assert not logical.has_entry

    @pytest.mark.parametrize("path", [
        "tachyon://h:p/data/a.csv",
        "tachyon://h:19998x/data/a.csv",
        "://h/data",
    ])
    def test_malformed_authority_raises_parse_error(self, codec, path):
        with pytest.raises(ParseError):
            codec.parse(path)


class TestEncode:
    """Tests for PathCodec.encode."""

    def test_encode_without_entry_id(self, codec):
        assert codec.encode("/data/a.csv") == "tachyon://h:19998/data/a.csv"

    def test_encode_with_entry_id(self, codec):
        assert codec.encode("/data/a.csv", 42) == "tachyon://h:19998/data/a.csv%42"

    def test_encode_without_header(self):
        assert PathCodec().encode("/data/a.csv", 3) == "/data/a.csv%3"

    def test_encode_rejects_separator_in_raw_path(self, codec):
        with pytest.raises(InvalidPathError):
            codec.encode("/data/100%.csv")

    def test_encode_rejects_negative_entry_id(self, codec):
        with pytest.raises(InvalidPathError):
            codec.encode("/data/a.csv", -1)

    def test_round_trip(self, codec):
        for raw_path, entry_id in [("/data/a.csv", 42), ("/x", None), ("/deep/dir/file", 0)]:
            assert codec.decode(codec.encode(raw_path, entry_id)) == (raw_path, entry_id)


class TestStagingPrefix:
    """Tests for staging prefix matching."""

    def test_path_under_prefix(self, codec):
        assert codec.is_staging("/tmp/staging/part-00000")

    def test_prefix_itself(self, codec):
        assert codec.is_staging("/tmp/staging")

    def test_sibling_with_same_prefix_string_is_not_staging(self, codec):
        assert not codec.is_staging("/tmp/staging2/part-00000")

    def test_unrelated_path(self, codec):
        assert not codec.is_staging("/data/a.csv")

    def test_trailing_slash_on_prefix(self):
        assert is_under_prefix("/tmp/staging/x", "/tmp/staging/")

    def test_empty_prefix_matches_nothing(self):
        assert not is_under_prefix("/data/a.csv", "")


def test_is_absolute():
    """Absolute paths are rooted or carry a scheme and authority."""
    assert is_absolute("/data")
    assert is_absolute("tachyon://h:19998/data")
    assert not is_absolute("data/a.csv")
    assert not is_absolute("../x")
