"""Tests for per-run summaries and merging by gateway URL."""

import json
import random

import pytest

from reportagg.aggregate import (
    RunSummary,
    Tally,
    group_tallies,
    merge_summaries,
    summarize,
)
from reportagg.config import AggregatorConfig
from reportagg.errors import MissingMetadataError
from reportagg.report import RunMetadata, ValidatedReport, parse_report


def _parse(doc):
    return parse_report(json.dumps(doc))


@pytest.mark.parametrize("n_pass,n_fail,n_skip", [(0, 0, 1), (3, 2, 1), (5, 0, 0)])
def test_ungrouped_entries_fall_into_others(make_report, make_entry, n_pass, n_fail, n_skip):
    entries = {}
    for outcome, count in (("pass", n_pass), ("fail", n_fail), ("skip", n_skip)):
        for i in range(count):
            name = f"{outcome}-{i}"
            entries[name] = make_entry([name], outcome)

    _, summary = summarize(_parse(make_report(entries=entries)))

    assert summary.results == {"Others": Tally(n_pass, n_fail, n_skip)}
    assert summary.results["Others"].to_dict() == {
        "pass": n_pass,
        "fail": n_fail,
        "skip": n_skip,
    }


def test_nested_entries_are_not_counted(make_report, make_entry):
    doc = make_report(
        entries={
            "login": make_entry(["login"], "pass"),
            "login > submit": make_entry(["login", "submit"], "fail"),
        }
    )
    _, summary = summarize(_parse(doc))
    assert summary.results == {"Others": Tally(passed=1)}
    assert sum(t.total for t in summary.results.values()) == 1


def test_two_groups(make_report, make_entry):
    doc = make_report(
        entries={
            "a": make_entry(["a"], "pass", group="UI"),
            "b": make_entry(["b"], "pass", group="UI"),
            "c": make_entry(["c"], "fail", group="API"),
        }
    )
    _, summary = summarize(_parse(doc))
    assert summary.to_dict()["results"] == {
        "UI": {"pass": 2, "fail": 0, "skip": 0},
        "API": {"pass": 0, "fail": 1, "skip": 0},
    }


def test_empty_group_uses_default(make_report, make_entry):
    doc = make_report(
        entries={
            "a": make_entry(["a"], "skip", group=""),
            "b": make_entry(["b"], "pass"),
        }
    )
    _, summary = summarize(_parse(doc))
    assert summary.results == {"Others": Tally(passed=1, skipped=1)}


def test_custom_default_group(make_report, make_entry):
    doc = make_report(entries={"a": make_entry(["a"], "fail")})
    _, summary = summarize(_parse(doc), AggregatorConfig(default_group="Misc"))
    assert summary.results == {"Misc": Tally(failed=1)}


def test_report_without_tests_has_empty_results(make_report):
    gateway_url, summary = summarize(_parse(make_report()))
    assert gateway_url == "https://gw.example.com"
    assert summary.results == {}


def test_missing_metadata_raises(make_entry):
    report = _parse({"a": make_entry(["a"])})
    with pytest.raises(MissingMetadataError):
        summarize(report)


def test_metadata_is_passed_through(make_report, make_entry):
    doc = make_report(
        gateway_url="https://gw.example.com/",
        version="2.0.0-rc.1",
        job_url="https://ci.example.com/jobs/7",
        time="2024-05-01T10:00:00.123Z",
        entries={"a": make_entry(["a"])},
    )
    gateway_url, summary = summarize(_parse(doc))

    assert gateway_url == "https://gw.example.com/"
    assert summary.metadata == RunMetadata(
        time="2024-05-01T10:00:00.123Z",
        gateway_url="https://gw.example.com/",
        version="2.0.0-rc.1",
        job_url="https://ci.example.com/jobs/7",
    )
    assert summary.to_dict()["metadata"] == {
        "time": "2024-05-01T10:00:00.123Z",
        "version": "2.0.0-rc.1",
        "job_url": "https://ci.example.com/jobs/7",
        "gateway_url": "https://gw.example.com/",
    }


def test_absent_optional_metadata_is_omitted(make_report):
    _, summary = summarize(_parse(make_report()))
    assert summary.to_dict()["metadata"] == {
        "time": "2024-05-01T10:00:00Z",
        "gateway_url": "https://gw.example.com",
    }


def test_tallies_do_not_depend_on_entry_order(make_report, make_entry):
    outcomes = ["pass", "fail", "skip"]
    groups = ["UI", "API", None]
    entries = {
        f"t{i}": make_entry([f"t{i}"], outcomes[i % 3], group=groups[i % 4 % 3])
        for i in range(30)
    }
    items = list(entries.items())
    expected = summarize(_parse(make_report(entries=dict(items))))[1].results

    rng = random.Random(7)
    for _ in range(5):
        rng.shuffle(items)
        _, summary = summarize(_parse(make_report(entries=dict(items))))
        assert summary.results == expected


def test_group_tallies_on_report_object():
    from reportagg.report import Outcome, TestEntry

    report = ValidatedReport(
        metadata=None,
        entries=(
            TestEntry("a", ("a",), "t", Outcome.PASS, group="UI"),
            TestEntry("b", ("b",), "t", Outcome.SKIP),
            TestEntry("b1", ("b", "1"), "t", Outcome.FAIL),
        ),
    )
    assert group_tallies(report) == {
        "UI": Tally(passed=1),
        "Others": Tally(skipped=1),
    }


def test_groups_keep_first_seen_order(make_report, make_entry):
    doc = make_report(
        entries={
            "a": make_entry(["a"], "fail", group="Zeta"),
            "b": make_entry(["b"], "pass"),
            "c": make_entry(["c"], "skip", group="Alpha"),
            "d": make_entry(["d"], "pass", group="Zeta"),
            "e": make_entry(["e"], "pass", group="Mid"),
        }
    )
    _, summary = summarize(_parse(doc))
    assert list(summary.results) == ["Zeta", "Others", "Alpha", "Mid"]
    assert list(summary.to_dict()["results"]) == ["Zeta", "Others", "Alpha", "Mid"]


def test_sample_report_group_order(sample_data):
    from reportagg.report import load_report

    _, summary = summarize(load_report(sample_data / "gateway_staging.json"))
    assert list(summary.results) == ["UI", "API", "Others"]


def test_run_summary_results_are_read_only():
    source = {"UI": Tally(passed=1)}
    summary = RunSummary(RunMetadata(time="t", gateway_url="https://gw"), source)

    with pytest.raises(TypeError):
        summary.results["API"] = Tally(failed=1)  # type: ignore[index]

    source["API"] = Tally(failed=1)
    assert list(summary.results) == ["UI"]


def test_tally_rejects_negative_counts():
    with pytest.raises(ValueError):
        Tally(passed=-1)


def test_run_summary_dict_round_trip():
    summary = RunSummary(
        metadata=RunMetadata(time="t", gateway_url="https://gw", version="1.0"),
        results={"UI": Tally(1, 2, 3), "Others": Tally(skipped=4)},
    )
    assert RunSummary.from_dict(json.loads(json.dumps(summary.to_dict()))) == summary


def test_merge_summaries_last_write_wins():
    first = RunSummary(RunMetadata(time="t1", gateway_url="https://gw"))
    second = RunSummary(RunMetadata(time="t2", gateway_url="https://gw"))
    other = RunSummary(RunMetadata(time="t3", gateway_url="https://other"))

    merged = merge_summaries(
        [("https://gw", first), ("https://other", other), ("https://gw", second)]
    )

    assert merged == {"https://gw": second, "https://other": other}


def test_merge_summaries_into_existing_mapping():
    existing = {"https://a": RunSummary(RunMetadata(time="t", gateway_url="https://a"))}
    added = RunSummary(RunMetadata(time="t", gateway_url="https://b"))
    result = merge_summaries([("https://b", added)], into=existing)
    assert result is existing
    assert set(result) == {"https://a", "https://b"}
