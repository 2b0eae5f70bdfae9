import logging

from notevault.logging import log_tool_call, redact_args


def test_redact_args_masks_emails_and_truncates_content():
    safe = redact_args({
        "path": "people/jane.md",
        "content": "contact jane@example.com " + "x" * 500,
        "paths": ["a.md", "bob@example.org.md"],
    })
    assert safe["path"] == "people/jane.md"
    assert "jane@example.com" not in safe["content"]
    assert safe["content"].endswith("chars)")
    assert safe["paths"][1] == "[redacted-email]"


def test_log_tool_call(caplog):
    logger = logging.getLogger("test.tools")
    with caplog.at_level(logging.INFO, logger="test.tools"):
        log_tool_call(logger, "obsidian_search_notes", {"query": "foo"})
    assert "tool_call obsidian_search_notes" in caplog.text
