"""Unit tests for line-aligned chunk splitting."""

from gdocs.chunking import split_into_chunks


class TestSplitIntoChunks:
    def test_small_text_is_one_chunk(self):
        assert split_into_chunks("a\nb\n", max_bytes=100) == ["a\nb\n"]

    def test_empty_text_has_no_chunks(self):
        assert split_into_chunks("", max_bytes=100) == []

    def test_joining_chunks_gives_back_input(self):
        text = "".join(f"line number {i}\n" for i in range(200))
        chunks = split_into_chunks(text, max_bytes=256)
        assert len(chunks) > 1
        assert "".join(chunks) == text

    def test_chunks_are_line_aligned_and_bounded(self):
        text = "".join(f"row {i}\n" for i in range(100))
        for chunk in split_into_chunks(text, max_bytes=50):
            assert chunk.endswith("\n")
            assert len(chunk.encode("utf-8")) <= 50

    def test_size_counts_utf8_bytes(self):
        # Each line is 3 characters but 7 bytes
        text = "ñññ\n" * 4
        chunks = split_into_chunks(text, max_bytes=14)
        assert chunks == ["ñññ\nñññ\n", "ñññ\nñññ\n"]

    def test_long_line_becomes_its_own_chunk(self):
        long_line = "x" * 100 + "\n"
        chunks = split_into_chunks("a\n" + long_line + "b\n", max_bytes=10)
        assert chunks == ["a\n", long_line, "b\n"]

    def test_text_without_trailing_newline(self):
        assert "".join(split_into_chunks("a\nb", max_bytes=2)) == "a\nb"

    def test_only_newline_ends_a_line(self):
        chunks = split_into_chunks("ab\u2028cd\nef\n", max_bytes=3)
        assert chunks == ["ab\u2028cd\n", "ef\n"]

    def test_text_without_final_newline_keeps_last_line(self):
        assert split_into_chunks("a\nb", max_bytes=100) == ["a\nb"]
