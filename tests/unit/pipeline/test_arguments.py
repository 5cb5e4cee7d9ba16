"""Tests for scan argument assembly."""

from __future__ import annotations

from nucleirunner.pipeline.arguments import build_mandatory_arguments, merge_extra_flags

MANDATORY = build_mandatory_arguments(
    "/w/.nuclei-runner/bin/nuclei/3.3.9/nuclei",
    "/w/nuclei-templates",
    "https://app.example",
    "/w/nucleiOutput-1.txt",
)


class TestBuildMandatoryArguments:
    """Tests for build_mandatory_arguments."""

    def test_order(self) -> None:
        assert MANDATORY == [
            "/w/.nuclei-runner/bin/nuclei/3.3.9/nuclei",
            "-templates", "/w/nuclei-templates",
            "-target", "https://app.example",
            "-output", "/w/nucleiOutput-1.txt",
            "-no-color",
        ]


class TestMergeExtraFlags:
    """Tests for merge_extra_flags."""

    def test_none_keeps_mandatory(self) -> None:
        assert merge_extra_flags(MANDATORY, None) == MANDATORY

    def test_blank_string_adds_nothing(self) -> None:
        assert merge_extra_flags(MANDATORY, "   ") == MANDATORY

    def test_whitespace_is_collapsed(self) -> None:
        merged = merge_extra_flags(MANDATORY, "  -v \t -debug\n-severity  critical ")
        assert merged[len(MANDATORY):] == ["-v", "-debug", "-severity", "critical"]

    def test_mandatory_list_is_not_mutated(self) -> None:
        mandatory = list(MANDATORY)
        merge_extra_flags(mandatory, "-v")
        assert mandatory == MANDATORY

    def test_repeated_flags_are_kept(self) -> None:
        merged = merge_extra_flags(MANDATORY, "-target https://other.example")
        assert merged.count("-target") == 2
        assert merged[-2:] == ["-target", "https://other.example"]
