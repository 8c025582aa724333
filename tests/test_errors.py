from __future__ import annotations

import unittest

from svn_scm.svn.errors import (
    SVN_ERROR_TOKENS,
    SvnError,
    SvnErrorCode,
    classify_stderr,
    format_stderr,
    user_message,
)


class ClassifyStderrTests(unittest.TestCase):
    def test_each_token_maps_to_its_code(self) -> None:
        for code, token in SVN_ERROR_TOKENS.items():
            with self.subTest(code=code):
                self.assertIs(classify_stderr(f"svn: {token}: something went wrong\n"), code)

    def test_codes_have_stable_string_values(self) -> None:
        self.assertEqual(SvnErrorCode.AUTHORIZATION_FAILED.value, "AuthorizationFailed")
        self.assertEqual(SvnErrorCode.NOT_SHARE_COMMON_ANCESTRY.value, "NotShareCommonAncestry")

    def test_first_table_entry_wins(self) -> None:
        stderr = "svn: E155004: Working copy locked\nsvn: E170001: Authorization failed\n"
        self.assertIs(classify_stderr(stderr), SvnErrorCode.AUTHORIZATION_FAILED)

    def test_credentials_exhausted_phrase_is_authorization_failure(self) -> None:
        stderr = "svn: E215004: No more credentials or we tried too many times.\n"
        self.assertIs(classify_stderr(stderr), SvnErrorCode.AUTHORIZATION_FAILED)

    def test_unknown_error_is_unclassified(self) -> None:
        self.assertIsNone(classify_stderr("svn: E200009: Could not add all targets\n"))
        self.assertIsNone(classify_stderr(""))

    def test_token_must_follow_svn_prefix(self) -> None:
        self.assertIsNone(classify_stderr("E155004 mentioned without prefix"))


class FormatStderrTests(unittest.TestCase):
    def test_strips_prefix_on_every_line(self) -> None:
        stderr = "svn: E155004: Run 'svn cleanup' to remove locks\nsvn: E155004: Working copy locked.\n"
        self.assertEqual(format_stderr(stderr), "Run 'svn cleanup' to remove locks\nWorking copy locked.\n")

    def test_leaves_warnings_untouched(self) -> None:
        stderr = "svn: warning: W200017: Property 'svn:ignore' not found"
        self.assertEqual(format_stderr(stderr), stderr)


class SvnErrorTests(unittest.TestCase):
    def test_carries_structured_fields(self) -> None:
        error = SvnError(
            "Failed to execute svn",
            stdout="",
            stderr="svn: E155007: '/tmp/x' is not a working copy\n",
            exit_code=1,
            error_code=SvnErrorCode.NOT_A_SVN_REPOSITORY,
            svn_command="info",
        )

        self.assertEqual(str(error), "Failed to execute svn")
        self.assertEqual(error.stderr_formatted, "'/tmp/x' is not a working copy\n")
        self.assertEqual(error.exit_code, 1)
        self.assertEqual(error.svn_command, "info")
        self.assertEqual(error.display_text(), "'/tmp/x' is not a working copy")

    def test_display_text_falls_back_to_message(self) -> None:
        self.assertEqual(SvnError("Failed to execute svn (ENOENT)").display_text(), "Failed to execute svn (ENOENT)")


class UserMessageTests(unittest.TestCase):
    def test_ancestry_message_names_the_path(self) -> None:
        error = SvnError("Failed", error_code=SvnErrorCode.NOT_SHARE_COMMON_ANCESTRY)
        self.assertEqual(
            user_message(error, fallback="Unable to switch branch", path="/work/copy"),
            "Path '/work/copy' does not share common version control ancestry with the requested switch location.",
        )

    def test_unclassified_error_shows_sanitized_stderr(self) -> None:
        error = SvnError("Failed", stderr="svn: E200009: Could not add all targets\n")
        self.assertEqual(user_message(error, fallback="Unable to add file"), "Could not add all targets")

    def test_empty_stderr_uses_fallback(self) -> None:
        self.assertEqual(user_message(SvnError("Failed"), fallback="Unable to update"), "Unable to update")

    def test_other_exceptions_use_their_text(self) -> None:
        self.assertEqual(user_message(ValueError("bad"), fallback="x"), "bad")
        self.assertEqual(user_message(ValueError(), fallback="x"), "x")


if __name__ == "__main__":
    unittest.main()
