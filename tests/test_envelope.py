"""Tests for printable envelope framing."""

import base64

import pytest
from gqg.envelope import frame, unframe, is_envelope, remove_whitespace
from gqg.types import InvalidOuterEncoding


class TestFrame:
    """Test framing binary data."""

    def test_frame_message(self) -> None:
        """Message envelopes use the message header."""
        text = frame(False, b"\x00\x01\x02")
        assert text == "[GQG1-MESSAGE:AAEC]"

    def test_frame_file(self) -> None:
        """File envelopes use the file header."""
        text = frame(True, b"hello")
        assert text == "[GQG1-FILE:aGVsbG8=]"

    def test_unframe_message(self) -> None:
        """Framed data is recovered with its type."""
        assert unframe("[GQG1-MESSAGE:AAEC]") == (False, b"\x00\x01\x02")

    def test_unframe_file(self) -> None:
        """Framed file data is recovered with its type."""
        assert unframe("[GQG1-FILE:aGVsbG8=]") == (True, b"hello")

    def test_unframe_empty_body(self) -> None:
        """An empty base64 region decodes to no bytes."""
        assert unframe("[GQG1-MESSAGE:]") == (False, b"")


class TestWhitespace:
    """Test whitespace tolerance."""

    def test_remove_whitespace(self) -> None:
        """All whitespace kinds are removed."""
        assert remove_whitespace(" a\tb\nc\r\nd  e") == "abcde"

    def test_line_wrapped_envelope(self) -> None:
        """Line-wrapped envelopes unframe to the original bytes."""
        data = bytes(range(200))
        text = frame(False, data)
        wrapped = "\n".join(text[i : i + 40] for i in range(0, len(text), 40))

        assert unframe("  " + wrapped + "\n\t") == (False, data)

    def test_whitespace_inside_header(self) -> None:
        """Whitespace inside the header is ignored too."""
        assert unframe("[GQG1- FILE :aGVs bG8=\n]") == (True, b"hello")


class TestMalformed:
    """Test rejection of malformed envelope text."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "hello",
            "[GQG1-ENCRYPTED-MESSAGE",
            "[GQG1-ENCRYPTED-MESSAGE]",
            "[GQG1-ENCRYPTED-MESSAGE:]",
            "[GQG1-ENCRYPTED-MESSAGE::]",
            "[GQG1-ENCRYPTED-FILE:::",
            "[GQG1-ID:AAEC]",
            "[gqg1-message:AAEC]",
            "GQG1-MESSAGE:AAEC]",
        ],
    )
    def test_unknown_header(self, text: str) -> None:
        """Foreign or missing headers are rejected."""
        with pytest.raises(InvalidOuterEncoding):
            unframe(text)

    @pytest.mark.parametrize("text", ["[GQG1-MESSAGE", "[GQG1-MESSAGE:AAEC", "[GQG1-FILE:aGVsbG8="])
    def test_missing_footer(self, text: str) -> None:
        """Envelopes must end with the closing bracket."""
        with pytest.raises(InvalidOuterEncoding):
            unframe(text)

    @pytest.mark.parametrize("text", ["[GQG1-MESSAGE]", "[GQG1-MESSAGEAAEC]", "[GQG1-FILE;aGVsbG8=]"])
    def test_missing_separator(self, text: str) -> None:
        """The header must be followed by a colon."""
        with pytest.raises(InvalidOuterEncoding):
            unframe(text)

    @pytest.mark.parametrize(
        "text",
        [
            "[GQG1-MESSAGE::]",
            "[GQG1-MESSAGE:::]",
            "[GQG1-MESSAGE:AAE]",
            "[GQG1-MESSAGE:A!EC]",
            "[GQG1-MESSAGE:aGVsbG8]",
            "[GQG1-MESSAGE:AAEC]]",
            "[GQG1-FILE:éééé]",
        ],
    )
    def test_invalid_base64(self, text: str) -> None:
        """The body must be strict base64."""
        with pytest.raises(InvalidOuterEncoding):
            unframe(text)


class TestIsEnvelope:
    """Test envelope sniffing."""

    def test_detects_envelopes(self) -> None:
        assert is_envelope(frame(False, b"abc"))
        assert is_envelope(frame(True, b"abc"))
        assert is_envelope(" [GQG1-MESSAGE:\nAAEC]\n")

    def test_rejects_other_text(self) -> None:
        assert not is_envelope("hello")
        assert not is_envelope("[GQG1-ID:" + base64.b64encode(bytes(32)).decode() + "]")
        assert not is_envelope("[GQG1-MESSAGE:AAEC")
