"""Tests for package.json discovery."""

from core.locate import find_manifests, search_roots


class TestFindManifests:
    """Test recursive manifest discovery."""

    def test_finds_manifests_at_any_depth(self, tmp_path, make_manifest):
        top = make_manifest("", {"name": "root"})
        nested = make_manifest("lambdas/a/src", {"name": "a"})

        assert find_manifests(tmp_path) == sorted([top.resolve(), nested.resolve()], key=str)

    def test_ignores_node_modules_and_test_dirs(self, tmp_path, make_manifest):
        keep = make_manifest("lambdas/a", {"name": "a"})
        make_manifest("lambdas/a/node_modules/lodash", {"name": "lodash"})
        make_manifest("lambdas/a/test/fixture", {"name": "fixture"})
        make_manifest("node_modules/express", {"name": "express"})

        assert find_manifests(tmp_path) == [keep.resolve()]

    def test_include_dirs_limit_search(self, tmp_path, make_manifest):
        a = make_manifest("lambdas/a", {"name": "a"})
        make_manifest("lambdas/b", {"name": "b"})

        assert find_manifests(tmp_path, include_dirs=["lambdas/a"]) == [a.resolve()]

    def test_exclude_dirs(self, tmp_path, make_manifest):
        a = make_manifest("lambdas/a", {"name": "a"})
        make_manifest("lambdas/b", {"name": "b"})
        make_manifest("lambdas/b/inner", {"name": "inner"})

        assert find_manifests(tmp_path, exclude_dirs=["lambdas/b"]) == [a.resolve()]

    def test_exclude_covering_include_root(self, tmp_path, make_manifest):
        make_manifest("lambdas/a", {"name": "a"})

        assert find_manifests(tmp_path, include_dirs=["lambdas/a"], exclude_dirs=["lambdas"]) == []

    def test_overlapping_roots_are_deduplicated(self, tmp_path, make_manifest):
        a = make_manifest("lambdas/a", {"name": "a"})

        result = find_manifests(tmp_path, include_dirs=["lambdas", "lambdas/a", "./lambdas/"])
        assert result == [a.resolve()]

    def test_results_are_sorted(self, tmp_path, make_manifest):
        paths = [make_manifest(name, {"name": name}) for name in ("c", "a", "b")]

        assert find_manifests(tmp_path) == sorted((p.resolve() for p in paths), key=str)

    def test_empty_when_nothing_matches(self, tmp_path):
        (tmp_path / "empty").mkdir()

        assert find_manifests(tmp_path, include_dirs=["empty"]) == []
        assert find_manifests(tmp_path, include_dirs=["missing"]) == []

    def test_other_json_files_are_ignored(self, tmp_path):
        (tmp_path / "package-lock.json").write_text("{}")
        (tmp_path / "tsconfig.json").write_text("{}")

        assert find_manifests(tmp_path) == []


class TestSearchRoots:
    def test_defaults_to_root(self, tmp_path):
        assert search_roots(tmp_path) == [tmp_path.resolve()]

    def test_include_dirs_resolved_against_root(self, tmp_path):
        assert search_roots(tmp_path, ["a", "b"]) == [
            (tmp_path / "a").resolve(),
            (tmp_path / "b").resolve(),
        ]
