"""
Tests for caption parsing and keyword matching.
"""
from models import CaptionBlock, KeywordHit
from services.caption_parser import find_keyword, parse_blocks
from fakes import SAMPLE_CAPTIONS


class TestParseBlocks:
    """Test cases for parse_blocks."""

    def test_parses_blocks_in_document_order(self):
        """Test that every well-formed block is parsed in order."""
        blocks = parse_blocks(SAMPLE_CAPTIONS)

        assert blocks == [
            CaptionBlock(start_time="00:00:01,000", text="hello world"),
            CaptionBlock(start_time="00:00:05,000", text="goodbye"),
        ]

    def test_multiline_text_is_joined_and_lowercased(self):
        """Test that text lines are joined with a single space."""
        document = "7\n00:01:00,500 --> 00:01:03,000\nThe QUICK brown\nFox Jumps\n"

        blocks = parse_blocks(document)

        assert len(blocks) == 1
        assert blocks[0].start_time == "00:01:00,500"
        assert blocks[0].text == "the quick brown fox jumps"

    def test_ordinal_only_block_is_skipped(self):
        """Test that a block with only an ordinal line is ignored."""
        document = SAMPLE_CAPTIONS + "3\n\n"

        blocks = parse_blocks(document)

        assert [b.start_time for b in blocks] == ["00:00:01,000", "00:00:05,000"]

    def test_block_without_text_is_skipped(self):
        """Test that a block with a time range but no text is ignored."""
        document = "1\n00:00:01,000 --> 00:00:02,000\n\n2\n00:00:03,000 --> 00:00:04,000\nkept\n"

        blocks = parse_blocks(document)

        assert blocks == [CaptionBlock(start_time="00:00:03,000", text="kept")]

    def test_block_without_time_range_is_skipped(self):
        """Test that a block whose second line is not a range is ignored."""
        document = "1\nnot a time range\nsome text\n\n2\n00:00:03,000 --> 00:00:04,000\nkept\n"

        blocks = parse_blocks(document)

        assert blocks == [CaptionBlock(start_time="00:00:03,000", text="kept")]

    def test_windows_line_endings(self):
        """Test that CRLF documents parse like LF documents."""
        document = SAMPLE_CAPTIONS.replace("\n", "\r\n")

        assert parse_blocks(document) == parse_blocks(SAMPLE_CAPTIONS)

    def test_empty_document(self):
        """Test that an empty document yields no blocks."""
        assert parse_blocks("") == []
        assert parse_blocks("\n\n\n") == []


class TestFindKeyword:
    """Test cases for find_keyword."""

    def setup_method(self):
        """Set up test fixtures."""
        self.blocks = parse_blocks(SAMPLE_CAPTIONS)

    def test_single_hit(self):
        """Test the documented lookup example."""
        hits = find_keyword(self.blocks, "hello")

        assert hits == [KeywordHit(timestamp="00:00:01,000", text="hello world")]

    def test_case_insensitive(self):
        """Test that keyword case is ignored."""
        assert find_keyword(self.blocks, "HeLLo") == find_keyword(self.blocks, "hello")

    def test_substring_match(self):
        """Test that partial words match."""
        hits = find_keyword(self.blocks, "bye")

        assert [h.timestamp for h in hits] == ["00:00:05,000"]

    def test_no_match(self):
        """Test that an absent keyword yields no hits."""
        assert find_keyword(self.blocks, "python") == []

    def test_repeated_keyword_in_block_yields_one_hit(self):
        """Test that hits are not duplicated within a block."""
        blocks = parse_blocks("1\n00:00:01,000 --> 00:00:02,000\nna na na na\n")

        assert len(find_keyword(blocks, "na")) == 1

    def test_hits_preserve_block_order(self):
        """Test that several hits come back in document order."""
        document = (
            "1\n00:00:01,000 --> 00:00:02,000\ncats are great\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\ndogs too\n\n"
            "3\n00:00:05,000 --> 00:00:06,000\nmore cats\n"
        )

        hits = find_keyword(parse_blocks(document), "cats")

        assert [h.timestamp for h in hits] == ["00:00:01,000", "00:00:05,000"]

    def test_empty_keyword_matches_every_block(self):
        """Test that an empty keyword matches all blocks."""
        hits = find_keyword(self.blocks, "")

        assert len(hits) == len(self.blocks)
