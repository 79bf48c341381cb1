"""Tests for the cache block codec."""

import pytest

from thumby.cache.block import (
    is_cache_block,
    parse_block,
    parse_block_lenient,
    serialize_block,
    strip_block,
)
from thumby.exceptions import CacheError
from thumby.models.metadata import ResolvedMetadata

URL = "https://www.youtube.com/watch?v=hCc0OsyMbQk"
THUMB = "https://i.ytimg.com/vi/hCc0OsyMbQk/mqdefault.jpg"

BLOCK = f"""{URL}
Title: X
Author: Y
Thumbnail: {THUMB}
AuthorUrl: Z"""


def _metadata(**overrides) -> ResolvedMetadata:
    values = {
        "url": URL,
        "title": "X",
        "author": "Y",
        "thumbnail": THUMB,
        "author_url": "Z",
        "found": True,
    }
    values.update(overrides)
    return ResolvedMetadata(**values)


class TestSerializeBlock:
    """Tests for serialize_block."""

    def test_exact_format(self):
        """Test the 5-line layout and key order."""
        assert serialize_block(_metadata()) == BLOCK

    def test_collapses_newlines_in_values(self):
        """Test multi-line values become a single line."""
        block = serialize_block(_metadata(title="Part one\nPart two"))
        assert block.splitlines()[1] == "Title: Part one Part two"
        assert len(block.splitlines()) == 5

    def test_empty_field_raises(self):
        """Test a record with an empty field cannot be stored."""
        with pytest.raises(CacheError, match="AuthorUrl"):
            serialize_block(_metadata(author_url=""))

    def test_whitespace_only_field_raises(self):
        """Test a field that is empty once cleaned cannot be stored."""
        with pytest.raises(CacheError):
            serialize_block(_metadata(title=" \n "))


class TestRoundTrip:
    """A freshly serialized block is always accepted by parse_block."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {},
            {"title": "Colon: inside the title"},
            {"title": "Title: looks like a key"},
            {"title": "  padded  ", "author": "\tTabbed\t"},
            {"title": "Line one\nLine two\r\nLine three"},
            {"author": "AuthorUrl: https://evil.example"},
            {"author_url": "#"},
            {"url": "https://vimeo.com/76979871#t=2m10s"},
        ],
    )
    def test_closure(self, overrides):
        """Test serialize then parse yields a cached, equal record."""
        original = _metadata(**overrides)
        parsed = parse_block(serialize_block(original))

        assert parsed.from_cache
        assert parsed.found
        assert parsed.title == " ".join(original.title.split())
        assert parsed.author == " ".join(original.author.split())
        assert parsed.author_url == original.author_url
        assert parsed.thumbnail == original.thumbnail
        assert parsed.url == original.url

    def test_fields_equal_for_clean_values(self):
        """Test all five fields survive unchanged when already clean."""
        original = _metadata()
        parsed = parse_block(serialize_block(original))
        assert (parsed.url, parsed.title, parsed.author, parsed.thumbnail, parsed.author_url) == (
            original.url,
            original.title,
            original.author,
            original.thumbnail,
            original.author_url,
        )

    def test_local_thumbnail_round_trip(self, storage, vault):
        """Test a saved thumbnail round-trips while the file exists."""
        (vault / "thumbs").mkdir()
        (vault / "thumbs" / "hCc0OsyMbQk.jpg").write_bytes(b"jpg")
        original = _metadata(thumbnail="thumbs/hCc0OsyMbQk.jpg", image_localized=True)

        parsed = parse_block(serialize_block(original), save_images=True, storage=storage)

        assert parsed.from_cache
        assert parsed.image_localized
        assert parsed.thumbnail == "thumbs/hCc0OsyMbQk.jpg"


class TestStructuralRejection:
    """Malformed blocks are rejected with an empty record."""

    def _assert_rejected(self, text):
        result = parse_block(text)
        assert not result.from_cache
        assert not result.found

    def test_accepts_valid_block(self):
        """Test the reference block parses."""
        result = parse_block(BLOCK)
        assert result.from_cache
        assert result.title == "X"
        assert result.author_url == "Z"
        assert not result.image_localized

    def test_bare_url(self):
        """Test a single URL line is not a cache block."""
        self._assert_rejected(URL)

    def test_four_lines(self):
        """Test a missing line is rejected."""
        self._assert_rejected("\n".join(BLOCK.splitlines()[:4]))

    def test_six_lines(self):
        """Test an extra line is rejected."""
        self._assert_rejected(BLOCK + "\nExtra: line")

    def test_missing_separator(self):
        """Test a data line without ': ' is rejected."""
        self._assert_rejected(BLOCK.replace("Author: Y", "Author Y"))

    def test_colon_without_space(self):
        """Test 'Key:value' is not a valid separator."""
        self._assert_rejected(BLOCK.replace("Author: Y", "Author:Y"))

    def test_wrong_key_order(self):
        """Test keys must come in the fixed order."""
        lines = BLOCK.splitlines()
        lines[1], lines[2] = lines[2], lines[1]
        self._assert_rejected("\n".join(lines))

    def test_empty_value(self):
        """Test an empty value is rejected."""
        self._assert_rejected(BLOCK.replace("Title: X", "Title: "))

    def test_surrounding_blank_lines_ignored(self):
        """Test leading and trailing blank lines do not count."""
        assert parse_block(f"\n\n{BLOCK}\n\n").from_cache

    def test_rejected_record_keeps_url(self):
        """Test the empty record carries the block's URL line."""
        assert parse_block(URL + "\nTitle X").url == URL


class TestPolicyRejection:
    """Blocks whose thumbnail disagrees with the image policy are stale."""

    def test_remote_thumbnail_with_saving_on(self):
        """Test a remote thumbnail forces a re-fetch when images are saved."""
        result = parse_block(BLOCK, save_images=True)
        assert not result.from_cache

    def test_remote_thumbnail_with_existing_local_image(self):
        """Test a remote thumbnail is fine once the image is saved."""
        result = parse_block(BLOCK, save_images=True, existing_image="hCc0OsyMbQk.jpg")
        assert result.from_cache
        assert not result.image_localized

    def test_local_thumbnail_with_saving_off(self, storage, vault):
        """Test a local thumbnail forces a re-fetch when images are not saved."""
        (vault / "hCc0OsyMbQk.jpg").write_bytes(b"jpg")
        block = BLOCK.replace(THUMB, "hCc0OsyMbQk.jpg")
        assert not parse_block(block, save_images=False, storage=storage).from_cache

    def test_dangling_local_thumbnail(self, storage):
        """Test a local thumbnail missing on disk is rejected."""
        block = BLOCK.replace(THUMB, "attachments/hCc0OsyMbQk.jpg")
        result = parse_block(block, save_images=True, storage=storage)
        assert not result.from_cache
        assert not result.found

    def test_local_thumbnail_present(self, storage, vault):
        """Test a local thumbnail that exists is accepted."""
        (vault / "hCc0OsyMbQk.jpg").write_bytes(b"jpg")
        block = BLOCK.replace(THUMB, "hCc0OsyMbQk.jpg")
        result = parse_block(block, save_images=True, storage=storage)
        assert result.from_cache
        assert result.image_localized

    def test_local_thumbnail_without_storage(self):
        """Test a local thumbnail cannot be verified without storage."""
        block = BLOCK.replace(THUMB, "hCc0OsyMbQk.jpg")
        assert not parse_block(block, save_images=True).from_cache


class TestLenientAndHelpers:
    """Tests for the lenient parser and block helpers."""

    def test_lenient_ignores_policy(self):
        """Test the lenient parser accepts a policy-stale block."""
        result = parse_block_lenient(BLOCK.replace(THUMB, "missing.jpg"))
        assert result.found
        assert result.image_localized

    def test_lenient_still_checks_structure(self):
        """Test the lenient parser rejects malformed blocks."""
        assert not parse_block_lenient(URL).found

    def test_is_cache_block(self):
        """Test structural detection."""
        assert is_cache_block(BLOCK)
        assert not is_cache_block(URL)

    def test_strip_block(self):
        """Test a block is reduced to its URL line."""
        assert strip_block(BLOCK) == URL
        assert strip_block(f"\n  {URL}  \n") == URL
