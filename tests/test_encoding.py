from __future__ import annotations

import unittest
from unittest import mock

from svn_scm.svn.encoding import decode_output, encoding_exists, is_utf8, resolve_encoding
from tests.helpers import RecordingOutput

LATIN1_BYTES = "café déjà vu".encode("cp1252")


class ResolveEncodingTests(unittest.TestCase):
    def test_xml_output_is_always_utf8(self) -> None:
        output = RecordingOutput()
        result = resolve_encoding(LATIN1_BYTES, ["stat", "--xml"], "not-a-codec", fallback="cp1252", output=output)

        self.assertEqual(result, "utf-8")
        self.assertEqual(output.lines, [])

    def test_invalid_configured_encoding_is_reported_and_fallback_used(self) -> None:
        output = RecordingOutput()
        result = resolve_encoding(LATIN1_BYTES, ["log"], "klingon-8", output=output)

        self.assertEqual(result, "utf-8")
        self.assertEqual(output.lines, ["svn.default.encoding: Invalid Parameter: 'klingon-8'.\n"])

    def test_binary_codec_is_not_a_text_encoding(self) -> None:
        output = RecordingOutput()
        result = resolve_encoding(LATIN1_BYTES, ["cat"], "hex", output=output)

        self.assertEqual(result, "utf-8")
        self.assertEqual(output.lines, ["svn.default.encoding: Invalid Parameter: 'hex'.\n"])

    def test_configured_encoding_applies_to_non_utf8_output(self) -> None:
        self.assertEqual(resolve_encoding(LATIN1_BYTES, ["cat"], "cp1252"), "cp1252")

    def test_configured_encoding_is_skipped_for_valid_utf8(self) -> None:
        data = "café".encode("utf-8")
        self.assertEqual(resolve_encoding(data, ["cat"], "cp1252"), "utf-8")
        self.assertEqual(resolve_encoding(data, ["cat"], "cp1252", fallback="latin-1"), "latin-1")

    def test_detection_above_threshold_is_accepted(self) -> None:
        guess = {"encoding": "windows-1252", "confidence": 0.93}
        with mock.patch("svn_scm.svn.encoding.chardet.detect", return_value=guess) as detect:
            self.assertEqual(resolve_encoding(LATIN1_BYTES, ["cat"], ""), "windows-1252")
        detect.assert_called_once_with(LATIN1_BYTES)

    def test_detection_at_threshold_is_rejected(self) -> None:
        guess = {"encoding": "windows-1252", "confidence": 0.8}
        with mock.patch("svn_scm.svn.encoding.chardet.detect", return_value=guess):
            self.assertEqual(resolve_encoding(LATIN1_BYTES, ["cat"], "", fallback="latin-1"), "latin-1")

    def test_detection_of_unknown_codec_is_rejected(self) -> None:
        guess = {"encoding": "x-mystery", "confidence": 0.99}
        with mock.patch("svn_scm.svn.encoding.chardet.detect", return_value=guess):
            self.assertEqual(resolve_encoding(LATIN1_BYTES, ["cat"], ""), "utf-8")

    def test_detection_without_result_uses_fallback(self) -> None:
        guess = {"encoding": None, "confidence": 0.0}
        with mock.patch("svn_scm.svn.encoding.chardet.detect", return_value=guess):
            self.assertEqual(resolve_encoding(b"\x00\x01", ["cat"], ""), "utf-8")


class DecodeHelpersTests(unittest.TestCase):
    def test_encoding_exists(self) -> None:
        self.assertTrue(encoding_exists("utf-8"))
        self.assertTrue(encoding_exists("CP1252"))
        self.assertFalse(encoding_exists(""))
        self.assertFalse(encoding_exists("klingon-8"))
        self.assertFalse(encoding_exists("hex"))
        self.assertFalse(encoding_exists("rot13"))

    def test_is_utf8(self) -> None:
        self.assertTrue(is_utf8("ünïcode".encode("utf-8")))
        self.assertFalse(is_utf8(LATIN1_BYTES))

    def test_decode_output_never_raises(self) -> None:
        self.assertEqual(decode_output(LATIN1_BYTES, "cp1252"), "café déjà vu")
        self.assertIn("�", decode_output(LATIN1_BYTES, "utf-8"))
        self.assertIn("�", decode_output(LATIN1_BYTES, "klingon-8"))
        self.assertIn("�", decode_output(LATIN1_BYTES, "base64"))


if __name__ == "__main__":
    unittest.main()
