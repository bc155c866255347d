from docexplorer.extraction.text import clean_text, count_words


class TestCleanText:
    def test_normalizes_line_endings(self) -> None:
        assert clean_text("a\r\nb\rc") == "a\nb\nc"

    def test_collapses_blank_lines(self) -> None:
        assert clean_text("a\n\n\n\n\nb") == "a\n\nb"

    def test_collapses_spaces_and_tabs(self) -> None:
        assert clean_text("a  \t  b") == "a b"

    def test_strips(self) -> None:
        assert clean_text("  \n text \n ") == "text"

    def test_empty(self) -> None:
        assert clean_text("") == ""


class TestCountWords:
    def test_ignores_short_tokens(self) -> None:
        assert count_words("a an the tank of soil") == 3

    def test_empty(self) -> None:
        assert count_words("") == 0
