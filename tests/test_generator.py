"""
Tests for ReportGenerator operations over mocked data sources.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from pkgintel.core.exceptions import InvalidArgumentError, PackageNotFoundError
from pkgintel.core.models import (
    Lookup,
    MigrationEffort,
    RepoStat,
    Severity,
    TrendDirection,
    UpdateStatus,
)


def _repo(stars, archived=False):
    return RepoStat(owner="example", name="repo", stars=stars, archived=archived)


def _url(name):
    return f"git+https://github.com/example/{name}.git"


# =============================================================================
# research_package
# =============================================================================


class TestResearchPackage:
    """Tests for research_package."""

    def test_unknown_package_raises(self, make_generator):
        generator = make_generator()
        with pytest.raises(PackageNotFoundError) as exc_info:
            asyncio.run(generator.research_package("no-such-package"))
        assert 'Package "no-such-package" not found on npm' in str(exc_info.value)

    def test_registry_error_raises_not_found_with_detail(self, make_generator):
        generator = make_generator(errors={"flaky"})
        with pytest.raises(PackageNotFoundError) as exc_info:
            asyncio.run(generator.research_package("flaky"))
        assert exc_info.value.details == "registry unreachable for flaky"

    def test_full_report(self, make_generator, sample_profile, sample_repo, make_advisory):
        generator = make_generator(
            profiles=[sample_profile],
            weekly={"express": 30_000_000},
            monthly={"express": 120_000_000},
            repos={sample_profile.repository_url: sample_repo},
            advisories={"express": [make_advisory(Severity.LOW)]},
        )

        report = asyncio.run(generator.research_package("express", "4.18.0"))

        assert report.latest_version == "4.19.2"
        # 5.0.0-beta.1 > 4.19.2 > 4.19.0 > 4.18.2 > 4.18.0
        assert report.versions_behind == 4
        assert report.weekly_downloads == 30_000_000
        assert report.monthly_downloads == 120_000_000
        assert report.github.stars == 64000
        assert report.tally.total == 1
        # FIXED_NOW 2025-06-01 minus 2024-03-25T16:00Z
        assert report.days_since_last_publish == 432
        assert report.maintainer_count == 4
        assert report.typescript is False
        assert "versions behind" in report.recommendation

    def test_versions_behind_omitted_when_latest_or_invalid(self, make_generator, sample_profile):
        generator = make_generator(profiles=[sample_profile])

        assert asyncio.run(generator.research_package("express", "5.0.0-beta.1")).versions_behind is None
        assert asyncio.run(generator.research_package("express", "4.19")).versions_behind is None
        assert asyncio.run(generator.research_package("express", "9.9.9")).versions_behind is None
        assert asyncio.run(generator.research_package("express")).versions_behind is None

    def test_missing_sources_degrade_fields(self, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("solo")])

        report = asyncio.run(generator.research_package("solo"))
        data = report.to_dict()

        assert "weekly_downloads" not in data
        assert "monthly_downloads" not in data
        assert "github" not in data
        assert data["security"]["advisory_count"] == 0

    def test_surfaces_top_five_by_severity(self, make_generator, make_profile, make_advisory):
        advisories = [make_advisory(Severity.LOW) for _ in range(4)]
        advisories += [make_advisory(Severity.MODERATE) for _ in range(2)]
        advisories.append(make_advisory(Severity.CRITICAL, id="the-critical"))
        generator = make_generator(profiles=[make_profile("vuln")], advisories={"vuln": advisories})

        report = asyncio.run(generator.research_package("vuln"))

        assert report.tally.total == 7
        assert len(report.advisories) == 5
        assert report.advisories[0].id == "the-critical"
        assert report.advisories[1].severity is Severity.MODERATE
        assert report.to_dict()["security"]["critical_count"] == 1
        assert "critical" in report.recommendation

    def test_keywords_truncated(self, make_generator, make_profile):
        keywords = tuple(f"kw{i}" for i in range(15))
        generator = make_generator(profiles=[make_profile("wordy", keywords=keywords)])

        report = asyncio.run(generator.research_package("wordy"))
        assert report.keywords == keywords[:10]

    def test_recommendation_archived(self, make_generator, make_profile):
        profile = make_profile("old")
        generator = make_generator(
            profiles=[profile],
            repos={profile.repository_url: _repo(10, archived=True)},
        )
        report = asyncio.run(generator.research_package("old"))
        assert "archived" in report.recommendation

    def test_recommendation_stale(self, make_generator, make_profile):
        profile = make_profile("dusty", publish_times={"1.0.0": "2020-01-01T00:00:00Z"})
        generator = make_generator(profiles=[profile])

        report = asyncio.run(generator.research_package("dusty"))
        assert report.days_since_last_publish > 365
        assert "No release in" in report.recommendation

    def test_deterministic(self, make_generator, sample_profile, sample_repo):
        kwargs = dict(
            profiles=[sample_profile],
            weekly={"express": 1},
            repos={sample_profile.repository_url: sample_repo},
        )
        first = asyncio.run(make_generator(**kwargs).research_package("express", "4.17.1"))
        second = asyncio.run(make_generator(**kwargs).research_package("express", "4.17.1"))
        assert first.to_dict() == second.to_dict()


# =============================================================================
# compare_packages
# =============================================================================


class TestComparePackages:
    """Tests for compare_packages."""

    @pytest.mark.parametrize("packages", [[], ["only-one"], ["a", "b", "c", "d", "e", "f"]])
    def test_count_outside_range(self, make_generator, packages):
        generator = make_generator()
        with pytest.raises(InvalidArgumentError):
            asyncio.run(generator.compare_packages(packages))
        generator.registry.fetch_profile.assert_not_awaited()

    def test_one_row_per_request_in_order(self, make_generator, make_profile):
        generator = make_generator(
            profiles=[make_profile("small"), make_profile("big")],
            weekly={"small": 10, "big": 1_000_000},
            repos={_url("small"): _repo(5), _url("big"): _repo(20_000)},
        )

        result = asyncio.run(generator.compare_packages(["small", "missing", "big"]))

        assert [row.name for row in result.packages] == ["small", "missing", "big"]
        assert result.packages[1].is_sentinel
        assert result.ranking == ("big", "small")
        assert result.recommendation == (
            'Based on popularity and activity, "big" leads with 1,000,000 weekly '
            "downloads and 20,000 GitHub stars."
        )

    def test_stars_weighted(self, make_generator, make_profile):
        # 1,000 + 100 * 100 = 11,000 beats 10,000 + 0
        generator = make_generator(
            profiles=[make_profile("downloads"), make_profile("stars")],
            weekly={"downloads": 10_000, "stars": 1_000},
            repos={_url("stars"): _repo(100)},
        )
        result = asyncio.run(generator.compare_packages(["downloads", "stars"]))
        assert result.ranking == ("stars", "downloads")

    def test_ties_keep_request_order(self, make_generator, make_profile):
        generator = make_generator(
            profiles=[make_profile("a"), make_profile("b")],
            weekly={"a": 5, "b": 5},
        )
        result = asyncio.run(generator.compare_packages(["b", "a"]))
        assert result.ranking == ("b", "a")

    def test_all_missing(self, make_generator):
        result = asyncio.run(make_generator().compare_packages(["x", "y"]))

        assert len(result.packages) == 2
        assert all(row.is_sentinel for row in result.packages)
        assert result.ranking == ()
        assert result.recommendation is None
        assert "recommendation" not in result.to_dict()

    def test_rows_use_registry_name(self, make_generator, make_profile):
        profiles = {"jquery": make_profile("jQuery"), "lodash": make_profile("lodash")}
        generator = make_generator(weekly={"jquery": 10, "lodash": 20})
        generator.registry.fetch_profile = AsyncMock(
            side_effect=lambda name: Lookup.found(profiles[name])
        )

        result = asyncio.run(generator.compare_packages(["jquery", "lodash"]))

        assert [row.name for row in result.packages] == ["jQuery", "lodash"]
        assert result.ranking == ("lodash", "jQuery")

    def test_error_lookup_becomes_sentinel(self, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("ok")], errors={"down"})
        result = asyncio.run(generator.compare_packages(["ok", "down"]))
        assert result.packages[1].is_sentinel
        assert result.ranking == ("ok",)


# =============================================================================
# find_alternatives
# =============================================================================


class TestFindAlternatives:
    """Tests for find_alternatives."""

    def test_uncatalogued(self, make_generator):
        generator = make_generator()
        result = asyncio.run(generator.find_alternatives("left-pad", category="strings"))

        assert result.alternatives == ()
        assert result.recommendation == (
            'No curated alternatives found for "left-pad". '
            "Consider searching npm for similar packages."
        )
        assert result.category == "strings"
        generator.registry.fetch_profile.assert_not_awaited()

    def test_ranked_by_downloads_with_effort(self, make_generator, make_profile):
        generator = make_generator(
            profiles=[make_profile("date-fns"), make_profile("dayjs"), make_profile("luxon")],
            weekly={"date-fns": 20_000_000, "dayjs": 18_000_000, "luxon": 7_000_000},
        )

        result = asyncio.run(generator.find_alternatives("moment"))

        assert [a.name for a in result.alternatives] == ["date-fns", "dayjs", "luxon"]
        assert result.alternatives[1].migration_effort is MigrationEffort.LOW
        assert result.alternatives[0].migration_effort is MigrationEffort.MEDIUM
        assert "Tree-shakeable" in result.alternatives[0].pros
        assert result.alternatives[2].pros == ("Popular choice",)
        assert result.recommendation == (
            '"date-fns" is most popular, but "dayjs" offers the easiest migration from "moment".'
        )

    def test_caps_candidates(self, make_generator):
        generator = make_generator()
        asyncio.run(generator.find_alternatives("redux"))

        looked_up = [call.args[0] for call in generator.registry.fetch_profile.await_args_list]
        assert sorted(looked_up) == ["jotai", "mobx", "recoil", "zustand"]

    def test_missing_candidates_dropped(self, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("ky")], weekly={"ky": 2_000_000})

        result = asyncio.run(generator.find_alternatives("axios"))

        assert [a.name for a in result.alternatives] == ["ky"]
        assert result.recommendation == 'Consider "ky" - 2,000,000 weekly downloads.'

    def test_every_candidate_failed(self, make_generator):
        result = asyncio.run(make_generator().find_alternatives("moment"))
        assert result.alternatives == ()
        assert result.recommendation


# =============================================================================
# check_security
# =============================================================================


class TestCheckSecurity:
    """Tests for check_security."""

    def test_clean(self, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("zod", "3.23.8")])

        report = asyncio.run(generator.check_security("zod"))

        assert report.total_advisories == 0
        assert report.tally.total == 0
        assert report.latest_version == "3.23.8"
        assert report.recommendation == 'No known security advisories for "zod".'

    def test_critical_with_version(self, make_generator, make_profile, make_advisory):
        advisories = [make_advisory(Severity.CRITICAL), make_advisory(Severity.LOW)]
        generator = make_generator(
            profiles=[make_profile("lodash", "4.17.21")],
            advisories={"lodash": advisories},
        )

        report = asyncio.run(generator.check_security("lodash", "4.17.15"))

        assert report.tally.critical == 1
        assert report.tally.total == report.total_advisories == 2
        assert report.recommendation == (
            "CRITICAL: 1 critical vulnerabilities found. Update immediately! "
            "Latest version: 4.17.21"
        )
        generator.advisories.fetch_advisories.assert_awaited_once_with("lodash", "4.17.15")

    def test_missing_package_does_not_fail(self, make_generator, make_advisory):
        generator = make_generator(advisories={"gone": [make_advisory(Severity.HIGH)]})

        report = asyncio.run(generator.check_security("gone", "1.0.0"))

        assert report.latest_version is None
        assert "latest_version" not in report.to_dict()
        assert report.recommendation == "HIGH: 1 high severity issues. Update recommended."


# =============================================================================
# analyze_package_json
# =============================================================================


class TestAnalyzePackageJson:
    """Tests for analyze_package_json."""

    def test_minor_update(self, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("left-pad", "1.3.0")])

        result = asyncio.run(generator.analyze_package_json({"dependencies": {"left-pad": "^1.0.0"}}))

        dep = result.dependencies[0]
        assert dep.current == "1.0.0"
        assert dep.latest == "1.3.0"
        assert dep.status is UpdateStatus.MINOR
        assert dep.recommendation == "Minor update: 1.0.0 → 1.3.0"
        assert result.outdated_count == 1
        assert result.summary == "Analyzed 1 dependencies. 1 packages have updates available."

    def test_critical_advisory_overrides(self, make_generator, make_profile, make_advisory):
        generator = make_generator(
            profiles=[make_profile("left-pad", "1.3.0")],
            advisories={"left-pad": [make_advisory(Severity.CRITICAL)]},
        )

        result = asyncio.run(generator.analyze_package_json({"dependencies": {"left-pad": "^1.0.0"}}))

        dep = result.dependencies[0]
        assert dep.status is UpdateStatus.MINOR
        assert "security" in dep.recommendation
        assert result.security_issue_count == 1
        assert result.top_priorities == ("Update left-pad - 1 security issue(s)",)
        assert "1 security issues found." in result.summary

    def test_moderate_advisory_counted_but_not_urgent(self, make_generator, make_profile, make_advisory):
        generator = make_generator(
            profiles=[make_profile("pad", "1.0.0")],
            advisories={"pad": [make_advisory(Severity.MODERATE)]},
        )

        result = asyncio.run(generator.analyze_package_json({"dependencies": {"pad": "1.0.0"}}))

        dep = result.dependencies[0]
        assert dep.status is UpdateStatus.UP_TO_DATE
        assert dep.security_issues == 1
        assert dep.recommendation is None

    @pytest.mark.parametrize("spec", ["^1.0.0", "~1.0.0", ">=1.0.0", "1.0.0"])
    def test_baseline_operator_independent(self, make_generator, make_profile, spec):
        generator = make_generator(profiles=[make_profile("pad", "2.0.0")])

        result = asyncio.run(generator.analyze_package_json({"dependencies": {"pad": spec}}))

        dep = result.dependencies[0]
        assert dep.current == "1.0.0"
        assert dep.status is UpdateStatus.MAJOR

    def test_unknown_statuses(self, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("tagged", "1.0.0")])

        result = asyncio.run(generator.analyze_package_json({
            "dependencies": {"tagged": "latest", "ghost": "^1.0.0"},
        }))

        tagged, ghost = result.dependencies
        assert tagged.status is UpdateStatus.UNKNOWN
        assert ghost.status is UpdateStatus.UNKNOWN
        assert ghost.recommendation == "Package not found on npm"
        assert result.outdated_count == 0
        assert result.summary.endswith("All packages up to date!")

    def test_dev_dependencies(self, make_generator, make_profile):
        generator = make_generator(profiles=[make_profile("app", "1.0.0"), make_profile("tool", "2.1.0")])
        manifest = {"dependencies": {"app": "1.0.0"}, "devDependencies": {"tool": "^2.0.5"}}

        result = asyncio.run(generator.analyze_package_json(manifest))
        assert result.total_dependencies == 2
        assert result.dev_dependencies[0].status is UpdateStatus.MINOR

        without_dev = asyncio.run(generator.analyze_package_json(manifest, check_dev_deps=False))
        assert without_dev.total_dependencies == 1
        assert "dev_dependencies" not in without_dev.to_dict()

    def test_priorities(self, make_generator, make_profile, make_advisory):
        names = ["a", "b", "c", "d", "m1", "m2", "m3"]
        generator = make_generator(
            profiles=[make_profile(n, "2.0.0") for n in names],
            advisories={
                "a": [make_advisory(Severity.LOW)],
                "b": [make_advisory(Severity.LOW) for _ in range(3)],
                "c": [make_advisory(Severity.LOW) for _ in range(2)],
                "d": [make_advisory(Severity.LOW)],
            },
        )
        manifest = {"dependencies": {
            "a": "1.0.0", "b": "2.0.0", "c": "2.0.0", "d": "2.0.0",
            "m1": "1.0.0", "m2": "1.0.0", "m3": "1.0.0",
        }}

        result = asyncio.run(generator.analyze_package_json(manifest))

        assert result.top_priorities == (
            "Update b - 3 security issue(s)",
            "Update c - 2 security issue(s)",
            "Update a - 1 security issue(s)",
            "m1: major update 1.0.0 → 2.0.0",
            "m2: major update 1.0.0 → 2.0.0",
        )

    def test_caps_lookups(self, make_generator):
        generator = make_generator()
        deps = {f"pkg-{i}": "1.0.0" for i in range(30)}
        dev = {f"dev-{i}": "1.0.0" for i in range(30)}

        result = asyncio.run(generator.analyze_package_json({"dependencies": deps, "devDependencies": dev}))

        assert len(result.dependencies) == 20
        assert len(result.dev_dependencies) == 10
        assert generator.registry.fetch_profile.await_count == 30

    def test_malformed(self, make_generator):
        with pytest.raises(InvalidArgumentError):
            asyncio.run(make_generator().analyze_package_json({"dependencies": "express"}))


# =============================================================================
# get_trending
# =============================================================================


class TestGetTrending:
    """Tests for get_trending."""

    def test_unknown_category(self, make_generator):
        with pytest.raises(InvalidArgumentError) as exc_info:
            asyncio.run(make_generator().get_trending("blockchain"))
        assert "state-management" in str(exc_info.value)

    def test_ranked_with_trends(self, make_generator, make_profile):
        generator = make_generator(
            profiles=[make_profile(n) for n in ("zod", "yup", "valibot", "ajv")],
            weekly={"zod": 12_000_000, "yup": 5_000_000, "valibot": 1_100, "ajv": 80_000_000},
            monthly={"zod": 40_000_000, "yup": 20_000_000, "valibot": 4_000, "ajv": 400_000_000},
            repos={_url("zod"): _repo(33_000)},
        )

        result = asyncio.run(generator.get_trending("validation"))

        assert [p.name for p in result.packages] == ["ajv", "zod", "yup", "valibot"]
        trends = {p.name: p.trending for p in result.packages}
        assert trends["zod"] is TrendDirection.RISING
        assert trends["yup"] is TrendDirection.STABLE
        assert trends["valibot"] is TrendDirection.STABLE  # exactly 1.1x
        assert trends["ajv"] is TrendDirection.DECLINING
        assert result.top_pick == "ajv"
        assert result.rising_stars == ("zod",)
        assert result.packages[1].github_stars == 33_000
        assert '"ajv" leads validation' in result.recommendation

    def test_dropped_without_weekly(self, make_generator, make_profile):
        generator = make_generator(
            profiles=[make_profile("zod"), make_profile("yup")],
            weekly={"zod": 100},
        )
        result = asyncio.run(generator.get_trending("validation"))
        assert [p.name for p in result.packages] == ["zod"]
        assert result.packages[0].trending is TrendDirection.STABLE

    def test_nothing_found(self, make_generator):
        generator = make_generator()
        result = asyncio.run(generator.get_trending("state-management"))

        looked_up = [call.args[0] for call in generator.registry.fetch_profile.await_args_list]
        assert len(looked_up) == 8
        assert result.packages == ()
        assert result.top_pick is None

    def test_framework_echoed(self, make_generator):
        result = asyncio.run(make_generator().get_trending("animation", framework="react"))
        assert result.framework == "react"
        assert result.to_dict()["framework"] == "react"


# =============================================================================
# Repeated invocations
# =============================================================================


class TestRepeatedInvocations:
    """The same inputs over the same data give the same output."""

    @pytest.fixture
    def generator(self, make_generator, make_profile, make_advisory):
        profiles = [
            make_profile("moment", "2.30.1", versions=("2.29.0", "2.30.1")),
            make_profile("dayjs", "1.11.13"),
            make_profile("date-fns", "4.1.0"),
            make_profile("zod", "3.23.8"),
            make_profile("yup", "1.4.0"),
        ]
        return make_generator(
            profiles=profiles,
            weekly={"moment": 20_000, "dayjs": 18_000, "date-fns": 25_000, "zod": 900, "yup": 400},
            monthly={"zod": 2_000, "yup": 1_800},
            repos={_url("dayjs"): _repo(46_000), _url("zod"): _repo(33_000)},
            advisories={"moment": [make_advisory(Severity.HIGH), make_advisory(Severity.LOW)]},
        )

    @pytest.mark.parametrize(
        "operation",
        [
            lambda g: g.compare_packages(["moment", "dayjs", "missing"]),
            lambda g: g.find_alternatives("moment"),
            lambda g: g.check_security("moment", "2.29.0"),
            lambda g: g.analyze_package_json({
                "dependencies": {"moment": "^2.29.0", "zod": "~3.23.8"},
                "devDependencies": {"left-pad": "1.0.0"},
            }),
            lambda g: g.get_trending("validation", "react"),
        ],
        ids=["compare", "alternatives", "security", "analyze", "trending"],
    )
    def test_same_output(self, generator, operation):
        first = asyncio.run(operation(generator))
        second = asyncio.run(operation(generator))
        assert first.to_dict() == second.to_dict()
